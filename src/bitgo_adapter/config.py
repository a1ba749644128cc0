"""Application configuration using pydantic-settings.

The wallet SDK itself runs behind a local bridge process; these settings
tell the adapter where to find it and which wallet environment to request.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Wallet SDK
    # ======================
    bitgo_env: str = Field(
        default="test",
        description="Wallet SDK environment (no BitGo calls are made client-side)",
    )

    # ======================
    # SDK Bridge
    # ======================
    wallet_bridge_url: str = Field(
        default="http://127.0.0.1:3080", description="Base URL of the wallet SDK bridge"
    )
    wallet_bridge_timeout: float = Field(
        default=30.0, description="Request timeout for bridge calls (seconds)"
    )
    wallet_bridge_token: Optional[str] = Field(
        default=None, description="Bearer token for the wallet SDK bridge"
    )

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "bitgo_env": self.bitgo_env,
            "wallet_bridge": {
                "url": self.wallet_bridge_url,
                "timeout": self.wallet_bridge_timeout,
                "token": "***" if self.wallet_bridge_token else "(not set)",
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
