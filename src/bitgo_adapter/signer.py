"""Verify-then-sign for transaction prebuilds.

Signing flow:
1. Build a local wallet handle for the coin
2. Build verification options (one recipient, three public keys)
3. Ask the wallet SDK to verify the prebuild
4. Only if verification passes, sign with the user's private key
5. Return the SDK's signed transaction unchanged
"""

import logging
from enum import Enum
from typing import Any, Mapping, Optional, Union

from bitgo_adapter.wallet.base import (
    BACKUP_ROLE,
    BITGO_ROLE,
    USER_ROLE,
    Keychain,
    Recipient,
    VerificationError,
    VerifyOptions,
    WalletComponent,
    WalletHandle,
)

logger = logging.getLogger(__name__)

KeychainLike = Union[Keychain, Mapping[str, Any]]


class SignState(str, Enum):
    """Per-call progress of a signing request."""
    BUILT = "built"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    SIGNING = "signing"
    SIGNED = "signed"
    FAILED = "failed"


def build_verify_options(
    wallet: WalletHandle,
    user_keychain: Keychain,
    backup_keychain: Keychain,
    bitgo_pub: str,
    tx_prebuild: Any,
    address: str,
    amount: str,
    address_info: Any = None,
) -> VerifyOptions:
    """Assemble the options that check a prebuild sends `amount` to `address`.

    Only a single recipient is supported.
    """
    return VerifyOptions(
        recipients=[Recipient(address=address, amount=amount)],
        tx_prebuild=tx_prebuild,
        wallet=wallet,
        addresses={address: address_info},
        keychains={
            USER_ROLE: {"pub": user_keychain.pub},
            BACKUP_ROLE: {"pub": backup_keychain.pub},
            BITGO_ROLE: {"pub": bitgo_pub},
        },
        # Required, otherwise the SDK fails to retrieve tx details externally
        disable_networking=False,
    )


class TransactionSigner:
    """Signs prebuilt transactions with the local user key.

    Every prebuild is verified by the wallet SDK before signing. A failed
    verification raises and the signing step is never reached.
    """

    def __init__(self, wallet: WalletComponent):
        self.wallet = wallet

    async def sign_transaction(
        self,
        coin: str,
        user_keychain: KeychainLike,
        backup_keychain: KeychainLike,
        bitgo_pub: str,
        tx_prebuild: Any,
        address: str,
        amount: str,
        address_info: Any = None,
    ) -> dict:
        """Verify a prebuild and sign it with the user keychain.

        Args:
            coin: Coin type, e.g. 'btc'
            user_keychain: User keychain (needs pub and prv)
            backup_keychain: Backup keychain (needs pub)
            bitgo_pub: BitGo public key, used for verification only
            tx_prebuild: Transaction prebuild from the wallet service
            address: Destination address
            amount: Amount in base units (satoshi/wei/etc.) as a string
            address_info: Extra info for the destination address

        Returns:
            Signed transaction as returned by the wallet SDK

        Raises:
            InvalidKeychainError: If a keychain is malformed (before any SDK call)
            VerificationError: If the prebuild does not match the request
            SigningError: If the SDK fails to sign
            WalletComponentError: On any other SDK failure
        """
        user = Keychain.coerce(user_keychain)
        backup = Keychain.coerce(backup_keychain)

        handle = self.wallet.coin(coin).new_wallet_object({})
        options = build_verify_options(
            handle, user, backup, bitgo_pub, tx_prebuild, address, amount, address_info
        )
        state = SignState.BUILT
        logger.debug(f"[{coin}] sign request {state.value} for {address}")

        try:
            state = self._transition(coin, state, SignState.VERIFYING)
            verified = await handle.base_coin.verify_transaction(options)
            if not verified:
                raise VerificationError(f"Transaction prebuild for {coin} failed verification")
            state = self._transition(coin, state, SignState.VERIFIED)

            state = self._transition(coin, state, SignState.SIGNING)
            signed = await handle.sign_transaction(tx_prebuild, user.prv)
            self._transition(coin, state, SignState.SIGNED)
        except Exception as e:
            logger.warning(f"[{coin}] {state.value} -> {SignState.FAILED.value}: {e}")
            raise

        return signed

    @staticmethod
    def _transition(coin: str, current: SignState, new: SignState) -> SignState:
        logger.debug(f"[{coin}] {current.value} -> {new.value}")
        return new


async def sign_transaction(
    coin: str,
    user_keychain: KeychainLike,
    backup_keychain: KeychainLike,
    bitgo_pub: str,
    tx_prebuild: Any,
    address: str,
    amount: str,
    address_info: Optional[Any] = None,
) -> dict:
    """Verify and sign using the process-wide wallet component."""
    from bitgo_adapter.wallet.factory import get_wallet_component

    signer = TransactionSigner(get_wallet_component())
    return await signer.sign_transaction(
        coin,
        user_keychain,
        backup_keychain,
        bitgo_pub,
        tx_prebuild,
        address,
        amount,
        address_info,
    )
