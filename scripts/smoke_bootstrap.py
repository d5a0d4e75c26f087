"""Dry-run the wallet bootstrap against the in-memory SDK.

Nothing here talks to a relay or an RPC node. It loads config, builds the
connector list and transports, fires the mount gate and prints the outcome.

Usage:
  python scripts/smoke_bootstrap.py [settings.toml] [--fail signing_client|core|wallet]
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from loguru import logger

from walletboot.adapters.wallet_sdk import MockWalletSDKAdapter
from walletboot.application import WalletBootstrap
from walletboot.domain.connectors import flatten
from walletboot.domain.errors import ConfigError
from walletboot.infrastructure import AppConfig, configure_logging


async def _run(settings_path, fail_step) -> int:
    try:
        config = AppConfig.load(settings_path)
    except ConfigError as exc:
        logger.error(f"FATAL: {exc}")
        return 1

    boot = WalletBootstrap.from_config(config, MockWalletSDKAdapter(fail_step=fail_step))

    for group in boot.connectors:
        print(f"{group.name}: {', '.join(c.name for c in group.connectors) or '-'}")
    print(f"connectors total: {len(flatten(boot.connectors))}")

    for chain_id, client in sorted(boot.all_transports().items()):
        print(f"  chain {chain_id:>6} -> {client.url}")

    print(f"before mount: {boot.render(lambda: 'APP', placeholder='<placeholder>')}")
    boot.mount()
    state = await boot.wait_ready()
    print(f"session: {state.status.value}")
    print(f"after mount: {boot.render(lambda: 'APP', placeholder='<placeholder>')}")

    return 0 if boot.session.is_ready else 2


def main() -> int:
    parser = argparse.ArgumentParser(description="walletboot dry run")
    parser.add_argument("settings", nargs="?", default=None)
    parser.add_argument("--fail", dest="fail_step", choices=["signing_client", "core", "wallet"], default=None)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    configure_logging(args.log_level)
    return asyncio.run(_run(args.settings, args.fail_step))


if __name__ == "__main__":
    sys.exit(main())
