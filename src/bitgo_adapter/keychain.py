"""Keychain creation from a caller-supplied seed.

The seed must be exactly 32 bytes. Some coins (Stellar, Algorand) require
that length; the others accept 16-64 bytes, but one contract is used for
all of them.
"""

import logging
from typing import Awaitable, Optional, Union

from bitgo_adapter.wallet.base import Keychain, WalletComponent

logger = logging.getLogger(__name__)

SEED_LENGTH = 32

SeedLike = Union[bytes, bytearray, memoryview]


class InvalidSeedError(ValueError):
    """Exception raised when the input seed is missing or has the wrong length."""
    pass


def validate_seed(seed: Optional[SeedLike]) -> bytes:
    """Reject a missing seed or one that is not exactly SEED_LENGTH bytes.

    Returns:
        The seed as plain bytes

    Raises:
        InvalidSeedError: If the seed is missing, not bytes-like or the wrong size
    """
    if seed is None:
        raise InvalidSeedError(f"Missing {SEED_LENGTH}-byte input seed for create_keychain.")

    try:
        data = memoryview(seed).cast("B")
    except (TypeError, ValueError) as e:
        raise InvalidSeedError(f"Seed must be a bytes-like object, got {type(seed).__name__}") from e

    # Count bytes, not items: a memoryview of wider items is larger than len()
    if data.nbytes != SEED_LENGTH:
        raise InvalidSeedError(
            f"Missing {SEED_LENGTH}-byte input seed for create_keychain (got {data.nbytes} bytes)."
        )
    return data.tobytes()


def derive_seed(seed: SeedLike, backup: bool = False) -> bytearray:
    """Copy the seed and, for a backup keychain, bump its first byte.

    The wallet service rejects wallets whose user and backup keys are the
    same, so the backup derivation input must never equal the user one.
    The caller's buffer is not modified.
    """
    derived = bytearray(seed)
    if backup:
        derived[0] = (derived[0] + 1) % 256
    return derived


class KeychainFactory:
    """Turns seeds into wallet keychains via the wallet component.

    Usage:
        factory = KeychainFactory(get_wallet_component())
        user = await factory.create_keychain("btc", seed)
        backup = await factory.create_keychain("btc", seed, backup=True)
    """

    def __init__(self, wallet: WalletComponent):
        self.wallet = wallet

    def create_keychain(
        self, coin: str, seed: Optional[SeedLike], backup: bool = False
    ) -> Awaitable[Keychain]:
        """Create a keychain for a coin from a 32-byte seed.

        Seed validation happens immediately; the returned awaitable is the
        wallet component's own keychain creation call.

        Args:
            coin: Coin type, e.g. 'btc' or 'eth'
            seed: 32-byte input seed
            backup: True if this is the backup keychain

        Returns:
            Awaitable resolving to the created Keychain

        Raises:
            InvalidSeedError: If the seed is missing or not 32 bytes
        """
        derived = derive_seed(validate_seed(seed), backup)

        role = "backup" if backup else "user"
        logger.info(f"Creating {role} keychain for {coin}")

        return self.wallet.coin(coin).create_keychain(bytes(derived))


def create_keychain(
    coin: str, seed: Optional[SeedLike], backup: bool = False
) -> Awaitable[Keychain]:
    """Create a keychain using the process-wide wallet component."""
    from bitgo_adapter.wallet.factory import get_wallet_component

    return KeychainFactory(get_wallet_component()).create_keychain(coin, seed, backup)
