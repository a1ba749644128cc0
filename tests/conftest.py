"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["BITGO_ENV"] = "test"
os.environ["WALLET_BRIDGE_URL"] = "http://bridge.test"
os.environ["DEBUG"] = "true"

from bitgo_adapter.config import get_settings
from bitgo_adapter.wallet.base import BaseCoin, Keychain, WalletComponent, WalletHandle
from bitgo_adapter.wallet.factory import reset_wallet_component

USER_KEYCHAIN = Keychain(pub="xpub_user", prv="xprv_user")
SIGNED_TX = {"txHex": "0100000001abcdef"}


@pytest.fixture(autouse=True)
def reset_state():
    """Clear cached settings and the shared wallet component around each test."""
    get_settings.cache_clear()
    reset_wallet_component()
    yield
    get_settings.cache_clear()
    reset_wallet_component()


@pytest.fixture
def mock_coin():
    """Wallet SDK coin whose calls are recorded."""
    coin = MagicMock(spec=BaseCoin)
    coin.coin_type = "tbtc"
    coin.create_keychain = AsyncMock(return_value=USER_KEYCHAIN)
    coin.new_wallet_object = MagicMock(side_effect=lambda options=None: WalletHandle(coin, options))
    coin.verify_transaction = AsyncMock(return_value=True)
    coin.sign_transaction = AsyncMock(return_value=SIGNED_TX)
    return coin


@pytest.fixture
def mock_wallet(mock_coin):
    """Wallet component that hands out mock_coin for every coin type."""
    wallet = MagicMock(spec=WalletComponent)
    wallet.env = "test"
    wallet.coin = MagicMock(return_value=mock_coin)
    return wallet
