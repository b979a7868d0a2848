#!/usr/bin/env python3
"""
Command-line interface for the pool client.

Usage:
    python -m pool_sync.cli monitor --account 0xabc...
    python -m pool_sync.cli monitor --duration 60
    python -m pool_sync.cli quote-remove --account 0xabc... --shares 1.5
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .client import PoolClient
from .config import ConfigError, get_config
from .core.quantity import format_raw

logger = logging.getLogger(__name__)


def _log_changes(client: PoolClient):
    base, quote = client.base_token, client.quote_token

    def on_chain_state(snapshot):
        if snapshot is None:
            logger.info("Chain state: no wallet connected")
            return
        logger.info(
            f"Wallet: {format_raw(snapshot.account_base_balance, base.decimals, 6)} {base.name}, "
            f"{format_raw(snapshot.account_quote_balance, quote.decimals, 6)} {quote.name} | "
            f"Pool: {format_raw(snapshot.pool_base_balance, base.decimals, 6)} {base.name}, "
            f"{format_raw(snapshot.pool_quote_balance, quote.decimals, 6)} {quote.name} | "
            f"Shares: {format_raw(snapshot.pool_share_balance, base.decimals, 6)}"
            f" / {format_raw(snapshot.pool_share_supply, base.decimals, 6)}"
        )

    def on_rate(meta):
        if meta is None:
            logger.info("Exchange rate: unknown")
        else:
            logger.info(
                f"1 {base.name} = {meta.rate:.6f} {quote.name} "
                f"(updated {meta.last_updated.isoformat()}, {meta.age().total_seconds():.0f}s ago)"
            )

    def on_approvals(approvals):
        if approvals is not None:
            logger.info(
                f"Allowances: {format_raw(approvals.base_allowance, base.decimals, 6)} {base.name}, "
                f"{format_raw(approvals.quote_allowance, quote.decimals, 6)} {quote.name}"
            )

    def on_authorization(state):
        logger.info(f"Add liquidity authorization: {state.value}")

    client.poller.chain_state.subscribe(on_chain_state)
    client.poller.approvals.subscribe(on_approvals)
    client.exchange_rate.rate.subscribe(on_rate)
    client.add_liquidity.authorization.state.subscribe(on_authorization)


async def run_monitor(account: Optional[str], duration: Optional[float]) -> int:
    client = PoolClient.from_config(get_config())
    _log_changes(client)
    try:
        await client.start()
        client.connect_wallet(account)
        if duration is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(duration)
    finally:
        await client.close()
    return 0


async def run_quote_remove(account: str, shares: str) -> int:
    client = PoolClient.from_config(get_config())
    client.connect_wallet(account)
    try:
        await client.poller.refresh_once()
        if client.poller.chain_state.value is None:
            logger.error("Could not read pool state")
            return 1
        form = client.remove_liquidity
        if not form.set_shares(shares):
            logger.error(f"Invalid share quantity: {shares}")
            return 1
        quote = form.quote()
        if quote is None:
            logger.error("Removal unavailable: pool is empty or the quantity exceeds supply")
            return 1
        print(f"{client.base_token.name}\t{quote.payout_base_text}")
        print(f"{client.quote_token.name}\t{quote.payout_quote_text}")
        return 0
    finally:
        await client.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Oracle-priced liquidity pool client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    monitor = subparsers.add_parser("monitor", help="Follow pool state and prices")
    monitor.add_argument("--account", help="Wallet address to track")
    monitor.add_argument("--duration", type=float, help="Seconds to run (default: until interrupted)")

    quote_remove = subparsers.add_parser("quote-remove", help="Estimate a liquidity removal")
    quote_remove.add_argument("--account", required=True, help="Wallet address holding the shares")
    quote_remove.add_argument("--shares", required=True, help="Pool shares to redeem")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if args.command == "monitor":
            return asyncio.run(run_monitor(args.account, args.duration))
        return asyncio.run(run_quote_remove(args.account, args.shares))
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
