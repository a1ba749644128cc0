"""Base interfaces for the wallet SDK component.

The adapter never derives keys, verifies transactions or signs anything
itself. All of that belongs to the wallet SDK, which is reached through
the interfaces below:

1. WalletComponent.coin(coin_type) -> BaseCoin (local, no I/O)
2. BaseCoin.create_keychain(seed) -> Keychain
3. BaseCoin.new_wallet_object(options) -> WalletHandle (local, no I/O)
4. BaseCoin.verify_transaction(VerifyOptions) -> True or raises
5. WalletHandle.sign_transaction(tx_prebuild, prv) -> signed transaction
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional, Union

logger = logging.getLogger(__name__)


# Fixed role names for the three keys of a 2-of-3 wallet
USER_ROLE = "user"
BACKUP_ROLE = "backup"
BITGO_ROLE = "bitgo"


@dataclass
class Keychain:
    """Key material produced by the wallet SDK.

    Attributes:
        pub: Public key (xpub or chain-specific encoding)
        prv: Private key material, required for signing
        extra: Any other fields the SDK returned (e.g. ethAddress)
    """
    pub: str
    prv: Optional[str] = None
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Keychain":
        """Build a keychain from an SDK response body."""
        if "pub" not in data:
            raise WalletComponentError("Keychain response is missing 'pub'")
        extra = {k: v for k, v in data.items() if k not in ("pub", "prv")}
        return cls(pub=data["pub"], prv=data.get("prv"), extra=extra)

    @classmethod
    def coerce(cls, value: Union["Keychain", Mapping[str, Any]]) -> "Keychain":
        """Accept either a Keychain or a mapping with pub/prv keys.

        Raises:
            InvalidKeychainError: If the value is not a mapping or lacks pub
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise InvalidKeychainError(
                f"Keychain must be a Keychain or a mapping, got {type(value).__name__}"
            )
        if "pub" not in value:
            raise InvalidKeychainError("Keychain is missing 'pub'")
        return cls.from_dict(value)

    def to_dict(self) -> dict:
        data = dict(self.extra)
        data["pub"] = self.pub
        if self.prv is not None:
            data["prv"] = self.prv
        return data

    def __repr__(self) -> str:
        # Never print private key material
        prv = "***" if self.prv else None
        return f"Keychain(pub={self.pub!r}, prv={prv!r})"


@dataclass
class Recipient:
    """A single transfer output. Amount is in base units, as a string."""
    address: str
    amount: str


@dataclass
class VerifyOptions:
    """Everything the SDK needs to check a prebuild against the request.

    Attributes:
        recipients: Expected outputs (the signer always sends exactly one)
        tx_prebuild: Unsigned transaction, passed through untouched
        wallet: Local wallet handle for the coin
        addresses: Destination address -> extra address info (memo, tag, ...)
        keychains: Role name -> {"pub": ...} for user, backup and bitgo
        disable_networking: Must stay False, the SDK fetches tx details remotely
    """
    recipients: list[Recipient]
    tx_prebuild: Any
    wallet: "WalletHandle"
    addresses: dict[str, Any]
    keychains: dict[str, dict]
    disable_networking: bool = False

    def to_payload(self) -> dict:
        """Render in the camelCase shape the SDK expects."""
        return {
            "txParams": {
                "recipients": [asdict(r) for r in self.recipients],
            },
            "txPrebuild": self.tx_prebuild,
            "wallet": self.wallet.options,
            "verification": {
                "addresses": self.addresses,
                "keychains": self.keychains,
                "disableNetworking": self.disable_networking,
            },
        }


class WalletHandle:
    """Local wallet object scoped to one coin.

    Created without any network call; only used as context for
    verification and as the entry point for signing.
    """

    def __init__(self, base_coin: "BaseCoin", options: Optional[dict] = None):
        self.base_coin = base_coin
        self.options = dict(options or {})

    async def sign_transaction(self, tx_prebuild: Any, prv: Optional[str]) -> dict:
        """Sign a prebuild with the given private key."""
        return await self.base_coin.sign_transaction(tx_prebuild, prv)

    def __repr__(self) -> str:
        return f"WalletHandle(coin={self.base_coin.coin_type})"


class BaseCoin(ABC):
    """Per-coin view of the wallet SDK."""

    def __init__(self, coin_type: str):
        self.coin_type = coin_type

    @abstractmethod
    async def create_keychain(self, seed: bytes) -> Keychain:
        """Derive a keychain from a seed.

        Args:
            seed: Derivation input, already validated and transformed

        Returns:
            Keychain with pub and prv
        """
        pass

    @abstractmethod
    async def verify_transaction(self, options: VerifyOptions) -> bool:
        """Check that a prebuild matches the expected recipients and keys.

        Raises:
            VerificationError: If the prebuild does not match
        """
        pass

    @abstractmethod
    async def sign_transaction(self, tx_prebuild: Any, prv: Optional[str]) -> dict:
        """Sign a prebuild.

        Raises:
            SigningError: If the SDK cannot sign
        """
        pass

    def new_wallet_object(self, options: Optional[dict] = None) -> WalletHandle:
        """Create a local wallet handle for this coin."""
        return WalletHandle(self, options)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(coin={self.coin_type})"


class WalletComponent(ABC):
    """Long-lived handle to the wallet SDK, shared by all operations.

    Read-only after construction, so it is safe to use from concurrent tasks.
    """

    def __init__(self, env: str):
        self.env = env

    @abstractmethod
    def coin(self, coin_type: str) -> BaseCoin:
        """Get the per-coin interface. Does not perform I/O."""
        pass

    async def health_check(self) -> bool:
        """Check if the wallet SDK is reachable.

        Returns:
            True if the SDK is ready
        """
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(env={self.env})"


class WalletComponentError(Exception):
    """Exception raised by the wallet SDK component."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VerificationError(WalletComponentError):
    """Exception raised when a prebuild fails verification."""
    pass


class SigningError(WalletComponentError):
    """Exception raised when the SDK fails to sign a prebuild."""
    pass


class InvalidKeychainError(ValueError):
    """Exception raised when a caller-supplied keychain is malformed."""
    pass
