"""Tests for LedgerStatePoller."""
import asyncio

import pytest

from pool_sync.core.models import ApprovalState, ChainStateSnapshot
from pool_sync.ledger.poller import LedgerStatePoller

POOL = "0x3333333333333333333333333333333333333333"
ACCOUNT = "0x4444444444444444444444444444444444444444"
OTHER_ACCOUNT = "0x5555555555555555555555555555555555555555"


class FakeReader:
    """In-memory ledger: balances keyed by (token, owner)."""

    def __init__(self, base, quote):
        self.pool_address = POOL
        self.balances = {
            (base, ACCOUNT): 10,
            (quote, ACCOUNT): 20,
            (base, POOL): 1000,
            (quote, POOL): 2000,
        }
        self.allowances = {base: 0, quote: 0}
        self.share_balance = 100
        self.share_supply = 1000
        self.failing = set()
        self.fail_supply = False
        self.supply_hook = None
        self.calls = 0

    async def balance_of(self, token, owner):
        self.calls += 1
        if (token, owner) in self.failing:
            raise ConnectionError("rpc down")
        return self.balances.get((token, owner), 0)

    async def pool_reserve_of(self, token):
        return await self.balance_of(token, self.pool_address)

    async def allowance_of(self, token, owner, spender=None):
        return self.allowances[token]

    async def pool_share_balance_of(self, account):
        return self.share_balance

    async def pool_share_supply(self):
        if self.supply_hook is not None:
            await self.supply_hook()
        if self.fail_supply:
            raise ConnectionError("rpc down")
        return self.share_supply


@pytest.fixture
def reader(base_token, quote_token):
    return FakeReader(base_token.address, quote_token.address)


@pytest.fixture
def poller(reader, base_token, quote_token):
    return LedgerStatePoller(reader, base_token, quote_token, interval=0.01, account=ACCOUNT)


class TestLedgerStatePoller:
    """Test cases for the refresh cycle."""

    def test_initial_state(self, poller):
        assert poller.chain_state.value is None
        assert poller.approvals.value is None
        assert poller.account == ACCOUNT
        assert poller.running is False

    def test_interval_must_be_positive(self, reader, base_token, quote_token):
        with pytest.raises(ValueError):
            LedgerStatePoller(reader, base_token, quote_token, interval=0)

    @pytest.mark.asyncio
    async def test_refresh_publishes_both_batches(self, poller):
        """Test that one cycle publishes the snapshot and the allowances."""
        assert await poller.refresh_once() is True

        assert poller.chain_state.value == ChainStateSnapshot(
            account_base_balance=10,
            account_quote_balance=20,
            pool_base_balance=1000,
            pool_quote_balance=2000,
            pool_share_balance=100,
            pool_share_supply=1000,
        )
        assert poller.approvals.value == ApprovalState(0, 0)
        assert poller.cycles_completed == 1

    @pytest.mark.asyncio
    async def test_failed_read_keeps_previous_snapshot(self, poller, reader, base_token):
        """Test that a single failed read discards the whole snapshot batch."""
        await poller.refresh_once()
        first = poller.chain_state.value

        reader.balances[(base_token.address, ACCOUNT)] = 99
        reader.allowances[base_token.address] = 5
        # third read of the batch: the pool's base reserve
        reader.failing.add((base_token.address, POOL))

        assert await poller.refresh_once() is False

        # no partial update from the reads that did succeed
        assert poller.chain_state.value is first
        # the allowance batch is independent
        assert poller.approvals.value == ApprovalState(5, 0)
        assert poller.cycles_failed == 1

        reader.failing.clear()
        assert await poller.refresh_once() is True
        assert poller.chain_state.value.account_base_balance == 99

    @pytest.mark.asyncio
    async def test_failed_supply_read_keeps_previous_snapshot(self, poller, reader):
        await poller.refresh_once()
        first = poller.chain_state.value
        reader.share_supply = 2000
        reader.fail_supply = True

        assert await poller.refresh_once() is False
        assert poller.chain_state.value is first

    @pytest.mark.asyncio
    async def test_unchanged_state_does_not_notify(self, poller):
        seen = []
        poller.chain_state.subscribe(seen.append)

        await poller.refresh_once()
        await poller.refresh_once()

        assert len(seen) == 1
        assert poller.chain_state.version == 1

    @pytest.mark.asyncio
    async def test_no_account_clears_state(self, reader, base_token, quote_token):
        poller = LedgerStatePoller(reader, base_token, quote_token, interval=0.01)
        assert await poller.refresh_once() is False
        assert poller.chain_state.value is None
        assert reader.calls == 0

    @pytest.mark.asyncio
    async def test_disconnecting_wallet_clears_both_cells(self, poller):
        """Test that clearing the account empties both cells at once."""
        await poller.refresh_once()
        assert poller.chain_state.value is not None

        poller.set_account(None)

        assert poller.account is None
        assert poller.chain_state.value is None
        assert poller.approvals.value is None

    @pytest.mark.asyncio
    async def test_cycle_for_previous_account_is_dropped(self, poller, reader):
        """Test that results read for a replaced account are never published."""

        async def switch_account():
            poller.set_account(OTHER_ACCOUNT)

        reader.supply_hook = switch_account

        assert await poller.refresh_once() is False
        assert poller.account == OTHER_ACCOUNT
        assert poller.chain_state.value is None

    @pytest.mark.asyncio
    async def test_set_account_checksums(self, poller):
        poller.set_account(OTHER_ACCOUNT.lower())
        assert poller.account == OTHER_ACCOUNT


class TestPollingLoop:
    """Test cases for the fixed-interval tick loop."""

    @pytest.mark.asyncio
    async def test_loop_refreshes_repeatedly(self, poller, reader):
        poller.start()
        assert poller.running is True
        await asyncio.sleep(0.05)
        await poller.stop()

        assert poller.running is False
        assert poller.cycles_completed >= 2
        assert poller.chain_state.value is not None

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, poller):
        poller.start()
        task = poller._loop_task
        poller.start()
        assert poller._loop_task is task
        await poller.stop()

    @pytest.mark.asyncio
    async def test_slow_cycles_are_not_cancelled_by_later_ticks(self, poller, reader):
        """Test that a cycle longer than the interval still completes."""

        async def slow():
            await asyncio.sleep(0.03)

        reader.supply_hook = slow
        poller.start()
        await asyncio.sleep(0.1)
        await poller.stop()

        assert poller.cycles_completed >= 1
        assert poller.chain_state.value is not None

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight_cycles(self, poller, reader):
        blocked = asyncio.Event()

        async def block():
            await blocked.wait()

        reader.supply_hook = block
        poller.start()
        await asyncio.sleep(0.03)
        await poller.stop()

        assert poller._cycle_tasks == set()
        assert poller.chain_state.value is None
        assert poller.cycles_completed == 0

    @pytest.mark.asyncio
    async def test_account_switch_restarts_loop(self, poller):
        poller.start()
        first_task = poller._loop_task
        poller.set_account(OTHER_ACCOUNT)

        assert poller.running is True
        assert poller._loop_task is not first_task
        await poller.stop()
