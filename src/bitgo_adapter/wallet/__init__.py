"""Wallet SDK component interfaces and backends."""

from bitgo_adapter.wallet.base import (
    BaseCoin,
    InvalidKeychainError,
    Keychain,
    Recipient,
    SigningError,
    VerificationError,
    VerifyOptions,
    WalletComponent,
    WalletComponentError,
    WalletHandle,
)
from bitgo_adapter.wallet.factory import get_wallet_component, reset_wallet_component

__all__ = [
    "BaseCoin",
    "InvalidKeychainError",
    "Keychain",
    "Recipient",
    "SigningError",
    "VerificationError",
    "VerifyOptions",
    "WalletComponent",
    "WalletComponentError",
    "WalletHandle",
    "get_wallet_component",
    "reset_wallet_component",
]
