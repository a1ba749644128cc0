"""Client-side adapter around the BitGo wallet SDK.

Provides two operations:
- create_keychain: Turn a 32-byte seed into a user or backup keychain
- sign_transaction: Verify a transaction prebuild, then sign it locally
"""

from bitgo_adapter.keychain import (
    InvalidSeedError,
    KeychainFactory,
    create_keychain,
)
from bitgo_adapter.signer import SignState, TransactionSigner, sign_transaction
from bitgo_adapter.wallet.base import (
    InvalidKeychainError,
    Keychain,
    SigningError,
    VerificationError,
    WalletComponentError,
)

__all__ = [
    "InvalidKeychainError",
    "InvalidSeedError",
    "Keychain",
    "KeychainFactory",
    "SignState",
    "SigningError",
    "TransactionSigner",
    "VerificationError",
    "WalletComponentError",
    "create_keychain",
    "sign_transaction",
]
