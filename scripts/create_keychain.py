#!/usr/bin/env python3
"""Create a wallet keychain from a 32-byte hex seed.

Requires the wallet SDK bridge to be running (WALLET_BRIDGE_URL).

Usage:
    python scripts/create_keychain.py btc <64 hex chars>
    python scripts/create_keychain.py btc --backup   # prompts for seed
"""

import argparse
import asyncio
import json
import logging
import sys
from getpass import getpass

from bitgo_adapter.config import get_settings
from bitgo_adapter.keychain import InvalidSeedError, create_keychain
from bitgo_adapter.wallet.base import WalletComponentError


async def run(coin: str, seed: bytes, backup: bool) -> dict:
    keychain = await create_keychain(coin, seed, backup)
    return keychain.to_dict()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a wallet keychain from a seed")
    parser.add_argument("coin", help="Coin type, e.g. btc or eth")
    parser.add_argument("seed", nargs="?", help="32-byte seed as hex (prompted if omitted)")
    parser.add_argument("--backup", action="store_true", help="Create the backup keychain")
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    seed_hex = args.seed or getpass("Seed (hex): ")
    try:
        seed = bytes.fromhex(seed_hex.strip().removeprefix("0x"))
    except ValueError:
        print("Error: seed must be hex encoded")
        sys.exit(1)

    try:
        keychain = asyncio.run(run(args.coin, seed, args.backup))
    except InvalidSeedError as e:
        print(f"Error: {e}")
        sys.exit(1)
    except WalletComponentError as e:
        print(f"Wallet SDK error: {e}")
        sys.exit(2)

    print(json.dumps(keychain, indent=2))


if __name__ == "__main__":
    main()
