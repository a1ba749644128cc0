"""Wallet component factory.

The wallet component is created once per process and shared by keychain
creation and transaction signing. It is read-only after construction.
"""

import logging
from typing import Optional

from bitgo_adapter.config import get_settings
from bitgo_adapter.wallet.base import WalletComponent

logger = logging.getLogger(__name__)

_component_instance: Optional[WalletComponent] = None


def get_wallet_component() -> WalletComponent:
    """Get the process-wide wallet component.

    Returns:
        WalletComponent instance (created on first call)
    """
    global _component_instance

    if _component_instance is not None:
        return _component_instance

    settings = get_settings()
    logger.info(
        f"Initializing wallet component (env={settings.bitgo_env}, "
        f"bridge={settings.wallet_bridge_url})"
    )

    from bitgo_adapter.wallet.bridge import BridgeWalletComponent
    _component_instance = BridgeWalletComponent(
        base_url=settings.wallet_bridge_url,
        env=settings.bitgo_env,
        timeout=settings.wallet_bridge_timeout,
        token=settings.wallet_bridge_token,
    )

    return _component_instance


def set_wallet_component(component: WalletComponent) -> None:
    """Install a specific wallet component as the process-wide instance."""
    global _component_instance
    _component_instance = component


def reset_wallet_component():
    """Reset the wallet component instance (for testing)."""
    global _component_instance
    _component_instance = None


async def get_wallet_info() -> dict:
    """Get information about the current wallet component.

    Returns:
        Dict with env, backend class and health status
    """
    component = get_wallet_component()
    health = await component.health_check()

    return {
        "env": component.env,
        "healthy": health,
        "class": component.__class__.__name__,
    }
