"""
Fixed-interval refresh of ledger state.

Every tick spawns a refresh cycle that reads two independent batches:

- the chain state snapshot (wallet balances, pool reserves, pool shares)
- the wallet's allowances for the pool contract

Each batch is gathered as a unit and published atomically only when every read
in it succeeded. A failed batch keeps the previous value and is retried by the
next tick. Cycles that are still in flight when the next tick fires are left
running; whichever completes last wins.
"""

import asyncio
import logging
from typing import Optional, Set

from web3 import Web3

from ..config.tokens import TokenConfig
from ..core.errors import ReadCycleFailure
from ..core.models import ApprovalState, ChainStateSnapshot
from ..core.state_cell import StateCell
from .reader import LedgerReader

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 3.0


class LedgerStatePoller:
    """
    Publishes the latest ChainStateSnapshot and ApprovalState for one wallet.

    Both cells hold None while no wallet account is set.
    """

    def __init__(
        self,
        reader: LedgerReader,
        base_token: TokenConfig,
        quote_token: TokenConfig,
        interval: float = DEFAULT_POLL_INTERVAL,
        account: Optional[str] = None,
    ):
        if interval <= 0:
            raise ValueError(f"Poll interval must be positive, got {interval}")
        self.reader = reader
        self.base_token = base_token
        self.quote_token = quote_token
        self.interval = interval
        self.chain_state: StateCell[Optional[ChainStateSnapshot]] = StateCell(None, "chain_state")
        self.approvals: StateCell[Optional[ApprovalState]] = StateCell(None, "approvals")
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self._account: Optional[str] = None
        self._loop_task: Optional[asyncio.Task] = None
        self._cycle_tasks: Set[asyncio.Task] = set()
        self.cycles_completed = 0
        self.cycles_failed = 0

        if account is not None:
            self._account = Web3.to_checksum_address(account)

    @property
    def account(self) -> Optional[str]:
        return self._account

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def set_account(self, account: Optional[str]):
        """
        Switch the wallet identity being tracked.

        Clearing the account empties both cells at once. Any change tears down
        the running tick loop and in-flight cycles, then restarts polling.
        """
        account = Web3.to_checksum_address(account) if account else None
        if account == self._account:
            return
        self.logger.info(f"Wallet account changed: {self._account} -> {account}")
        self._account = account
        was_running = self.running
        self._cancel_tasks()
        self._clear()
        if was_running:
            self.start()

    def start(self):
        """Start the tick loop on the running event loop. No-op if already running."""
        if self.running:
            return
        self._loop_task = asyncio.get_running_loop().create_task(self._tick_loop())
        self.logger.info(f"Ledger polling started every {self.interval}s")

    async def stop(self):
        """Cancel the tick loop and all in-flight cycles and wait for them to finish."""
        tasks = self._cancel_tasks()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.logger.info("Ledger polling stopped")

    def _cancel_tasks(self):
        tasks = list(self._cycle_tasks)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
        for task in tasks:
            task.cancel()
        self._loop_task = None
        self._cycle_tasks.clear()
        return tasks

    def _clear(self):
        self.chain_state.set(None)
        self.approvals.set(None)

    async def _tick_loop(self):
        loop = asyncio.get_running_loop()
        while True:
            task = loop.create_task(self.refresh_once())
            self._cycle_tasks.add(task)
            task.add_done_callback(self._cycle_tasks.discard)
            await asyncio.sleep(self.interval)

    async def refresh_once(self) -> bool:
        """
        Run one refresh cycle.

        Never raises for read failures; they are logged and the previous values
        are kept.

        Returns:
            True if both batches were published
        """
        account = self._account
        if account is None:
            self._clear()
            return False

        snapshot_result, approvals_result = await asyncio.gather(
            self._read_chain_state(account),
            self._read_approvals(account),
            return_exceptions=True,
        )

        if account != self._account:
            self.logger.debug(f"Dropping cycle for previous account {account}")
            return False

        ok = True
        for name, cell, result in (
            ("chain state", self.chain_state, snapshot_result),
            ("approvals", self.approvals, approvals_result),
        ):
            if isinstance(result, ReadCycleFailure):
                ok = False
                self.logger.warning(f"Ledger refresh failed, keeping previous {name}: {result}")
            elif isinstance(result, BaseException):
                raise result
            else:
                cell.set(result)

        if ok:
            self.cycles_completed += 1
        else:
            self.cycles_failed += 1
        return ok

    async def _read_chain_state(self, account: str) -> ChainStateSnapshot:
        base, quote = self.base_token.address, self.quote_token.address
        try:
            (
                account_base,
                account_quote,
                pool_base,
                pool_quote,
                share_balance,
                share_supply,
            ) = await asyncio.gather(
                self.reader.balance_of(base, account),
                self.reader.balance_of(quote, account),
                self.reader.pool_reserve_of(base),
                self.reader.pool_reserve_of(quote),
                self.reader.pool_share_balance_of(account),
                self.reader.pool_share_supply(),
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise ReadCycleFailure("chain state", e) from e

        return ChainStateSnapshot(
            account_base_balance=account_base,
            account_quote_balance=account_quote,
            pool_base_balance=pool_base,
            pool_quote_balance=pool_quote,
            pool_share_balance=share_balance,
            pool_share_supply=share_supply,
        )

    async def _read_approvals(self, account: str) -> ApprovalState:
        try:
            base_allowance, quote_allowance = await asyncio.gather(
                self.reader.allowance_of(self.base_token.address, account),
                self.reader.allowance_of(self.quote_token.address, account),
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            raise ReadCycleFailure("approvals", e) from e
        return ApprovalState(base_allowance=base_allowance, quote_allowance=quote_allowance)
