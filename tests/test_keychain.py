"""Tests for keychain creation from seeds."""

from array import array

import pytest

from bitgo_adapter.keychain import (
    SEED_LENGTH,
    InvalidSeedError,
    KeychainFactory,
    create_keychain,
    derive_seed,
)
from bitgo_adapter.wallet.base import Keychain, WalletComponentError
from bitgo_adapter.wallet.factory import set_wallet_component


def seed_passed(mock_coin) -> bytes:
    """Seed handed to the SDK on the most recent create call."""
    return mock_coin.create_keychain.call_args.args[0]


class TestSeedValidation:
    """Seeds must be present and exactly 32 bytes."""

    @pytest.mark.parametrize("length", [0, 1, 16, 31, 33, 64])
    def test_wrong_length_rejected(self, mock_wallet, mock_coin, length):
        """Test that any length other than 32 is rejected before delegation."""
        factory = KeychainFactory(mock_wallet)

        with pytest.raises(InvalidSeedError):
            factory.create_keychain("btc", bytes(length), False)

        mock_wallet.coin.assert_not_called()
        mock_coin.create_keychain.assert_not_called()

    def test_missing_seed_rejected(self, mock_wallet, mock_coin):
        """Test that a None seed is rejected."""
        factory = KeychainFactory(mock_wallet)

        with pytest.raises(InvalidSeedError, match="32-byte"):
            factory.create_keychain("btc", None)

        mock_coin.create_keychain.assert_not_called()

    def test_wide_item_memoryview_rejected(self, mock_wallet, mock_coin):
        """Test that a 32-item view of 2-byte items (64 bytes) is rejected."""
        factory = KeychainFactory(mock_wallet)
        seed = memoryview(array("H", range(32)))

        with pytest.raises(InvalidSeedError, match="64 bytes"):
            factory.create_keychain("btc", seed)

        mock_coin.create_keychain.assert_not_called()

    def test_str_seed_rejected(self, mock_wallet, mock_coin):
        """Test that a 32-character string is not accepted as a seed."""
        factory = KeychainFactory(mock_wallet)

        with pytest.raises(InvalidSeedError, match="bytes-like"):
            factory.create_keychain("btc", "a" * 32)

        mock_coin.create_keychain.assert_not_called()

    def test_int_list_seed_rejected(self, mock_wallet, mock_coin):
        """Test that a list of 32 ints is not accepted as a seed."""
        factory = KeychainFactory(mock_wallet)

        with pytest.raises(InvalidSeedError):
            factory.create_keychain("btc", [0] * 32)

        mock_coin.create_keychain.assert_not_called()

    @pytest.mark.asyncio
    async def test_byte_item_memoryview_accepted(self, mock_wallet, mock_coin):
        """Test that a 2-D byte view of 32 bytes reaches the SDK flattened."""
        factory = KeychainFactory(mock_wallet)
        seed = memoryview(bytes(range(32))).cast("B", shape=[4, 8])

        await factory.create_keychain("btc", seed)

        assert seed_passed(mock_coin) == bytes(range(32))

    def test_invalid_seed_is_value_error(self):
        """Test that InvalidSeedError can be caught as ValueError."""
        assert issubclass(InvalidSeedError, ValueError)

    def test_error_raised_at_call_time(self, mock_wallet):
        """Test that validation fails synchronously, without awaiting."""
        factory = KeychainFactory(mock_wallet)

        # No event loop involved: the raise happens on the call itself
        with pytest.raises(InvalidSeedError):
            factory.create_keychain("eth", b"\x00" * 10, True)


class TestSeedTransform:
    """Tests for the backup seed perturbation."""

    def test_user_seed_unchanged(self):
        """Test that a user seed is copied as-is."""
        seed = bytes(range(32))
        assert derive_seed(seed, backup=False) == bytearray(seed)

    def test_backup_seed_increments_first_byte(self):
        """Test that only byte 0 changes for a backup seed."""
        seed = bytes(range(32))
        derived = derive_seed(seed, backup=True)

        assert derived[0] == 1
        assert derived[1:] == bytearray(seed[1:])

    def test_backup_seed_wraps_around(self):
        """Test that 0xFF wraps to 0x00."""
        derived = derive_seed(b"\xff" * 32, backup=True)

        assert derived[0] == 0
        assert derived[1:] == bytearray(b"\xff" * 31)

    def test_returns_independent_copy(self):
        """Test that the caller's buffer is never mutated."""
        seed = bytearray(32)
        derived = derive_seed(seed, backup=True)

        assert seed == bytearray(32)
        assert derived is not seed

    def test_accepts_memoryview(self):
        """Test that any bytes-like object works."""
        seed = memoryview(bytes(32))
        assert derive_seed(seed, backup=True)[0] == 1


class TestKeychainFactory:
    """Tests for KeychainFactory delegation."""

    @pytest.mark.asyncio
    async def test_zero_seed_user(self, mock_wallet, mock_coin):
        """Test that an all-zero user seed is passed through unchanged."""
        factory = KeychainFactory(mock_wallet)

        keychain = await factory.create_keychain("btc", bytes(32), False)

        assert keychain is mock_coin.create_keychain.return_value
        assert seed_passed(mock_coin) == bytes(32)
        mock_wallet.coin.assert_called_once_with("btc")

    @pytest.mark.asyncio
    async def test_zero_seed_backup(self, mock_wallet, mock_coin):
        """Test that an all-zero backup seed becomes [1, 0, 0, ...]."""
        factory = KeychainFactory(mock_wallet)

        await factory.create_keychain("btc", bytes(32), True)

        assert seed_passed(mock_coin) == b"\x01" + bytes(31)

    @pytest.mark.asyncio
    async def test_max_seed_backup_wraps(self, mock_wallet, mock_coin):
        """Test that an all-0xFF backup seed becomes [0, 0xFF, ...]."""
        factory = KeychainFactory(mock_wallet)

        await factory.create_keychain("eth", b"\xff" * 32, True)

        assert seed_passed(mock_coin) == b"\x00" + b"\xff" * 31

    @pytest.mark.asyncio
    async def test_user_and_backup_inputs_differ(self, mock_wallet, mock_coin):
        """Test that user and backup derivations never share an input."""
        factory = KeychainFactory(mock_wallet)
        seed = bytes([7] * 32)

        await factory.create_keychain("btc", seed, False)
        user_input = seed_passed(mock_coin)
        await factory.create_keychain("btc", seed, True)
        backup_input = seed_passed(mock_coin)

        assert user_input != backup_input
        assert user_input[1:] == backup_input[1:]
        assert backup_input[0] == (user_input[0] + 1) % 256

    @pytest.mark.asyncio
    async def test_deterministic_input(self, mock_wallet, mock_coin):
        """Test that repeated calls pass identical input."""
        factory = KeychainFactory(mock_wallet)
        seed = bytes(range(100, 132))

        await factory.create_keychain("xlm", seed, True)
        first = seed_passed(mock_coin)
        await factory.create_keychain("xlm", seed, True)
        second = seed_passed(mock_coin)

        assert first == second

    @pytest.mark.asyncio
    async def test_caller_buffer_not_mutated(self, mock_wallet):
        """Test that a mutable caller buffer survives a backup derivation."""
        factory = KeychainFactory(mock_wallet)
        seed = bytearray(b"\x10" * SEED_LENGTH)

        await factory.create_keychain("btc", seed, True)

        assert seed == bytearray(b"\x10" * SEED_LENGTH)

    @pytest.mark.asyncio
    async def test_sdk_error_propagates(self, mock_wallet, mock_coin):
        """Test that SDK failures surface unchanged."""
        error = WalletComponentError("unsupported coin: nope", status_code=400)
        mock_coin.create_keychain.side_effect = error
        factory = KeychainFactory(mock_wallet)

        with pytest.raises(WalletComponentError) as exc_info:
            await factory.create_keychain("nope", bytes(32))

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_module_function_uses_shared_component(self, mock_wallet, mock_coin):
        """Test that create_keychain() goes through the process-wide component."""
        set_wallet_component(mock_wallet)

        keychain = await create_keychain("btc", bytes(32), True)

        assert isinstance(keychain, Keychain)
        assert seed_passed(mock_coin)[0] == 1
