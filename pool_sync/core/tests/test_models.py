"""Tests for the shared value types."""
import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from pool_sync.core.errors import MissingPrice, ReadCycleFailure
from pool_sync.core.models import (
    ApprovalState,
    ChainStateSnapshot,
    ExchangeRateMeta,
    PriceObservation,
)


def make_snapshot(**overrides):
    values = dict(
        account_base_balance=10,
        account_quote_balance=20,
        pool_base_balance=1000,
        pool_quote_balance=2000,
        pool_share_balance=100,
        pool_share_supply=1000,
    )
    values.update(overrides)
    return ChainStateSnapshot(**values)


class TestChainStateSnapshot:
    """Test cases for ledger snapshots."""

    def test_pool_not_empty(self):
        assert make_snapshot().pool_is_empty is False

    @pytest.mark.parametrize("field_name", [
        "pool_share_supply", "pool_base_balance", "pool_quote_balance",
    ])
    def test_pool_empty_when_any_pool_figure_is_zero(self, field_name):
        """Test that zero supply or a zero reserve makes the pool empty."""
        assert make_snapshot(**{field_name: 0}).pool_is_empty is True

    def test_snapshot_is_immutable(self):
        snapshot = make_snapshot()
        with pytest.raises(dataclasses.FrozenInstanceError):
            snapshot.pool_share_supply = 0

    def test_snapshots_compare_by_value(self):
        assert make_snapshot() == make_snapshot()
        assert make_snapshot() != make_snapshot(pool_share_balance=99)


def test_approval_state_covers():
    approvals = ApprovalState(base_allowance=100, quote_allowance=50)
    assert approvals.covers(100, 50)
    assert not approvals.covers(101, 50)
    assert not approvals.covers(100, 51)


class TestPriceObservation:
    """Test cases for price observations."""

    def test_price_as_number(self):
        obs = PriceObservation(price=6140993501, conf=3540000, expo=-8, publish_time=1)
        assert obs.price_as_number == pytest.approx(61.40993501)

    def test_supersedes_requires_newer_publish_time(self):
        """Test that only strictly newer observations replace older ones."""
        older = PriceObservation(price=1, conf=0, expo=0, publish_time=100)
        same = PriceObservation(price=2, conf=0, expo=0, publish_time=100)
        newer = PriceObservation(price=3, conf=0, expo=0, publish_time=101)
        assert older.supersedes(None)
        assert newer.supersedes(older)
        assert not same.supersedes(older)
        assert not older.supersedes(newer)

    def test_from_payload(self):
        """Test decoding a Hermes-style update with string numbers."""
        payload = {
            "id": "ab" * 32,
            "price": {
                "price": "6140993501",
                "conf": "3540000",
                "expo": -8,
                "publish_time": 1700000000,
            },
        }
        feed_id, obs = PriceObservation.from_payload(payload)
        assert feed_id == "ab" * 32
        assert obs == PriceObservation(6140993501, 3540000, -8, 1700000000)

    @pytest.mark.parametrize("payload", [
        {},
        {"id": "ab"},
        {"id": "ab", "price": None},
        {"id": "ab", "price": {"price": "x", "expo": -8, "publish_time": 1}},
        {"id": "ab", "price": {"price": "1", "publish_time": 1}},
    ])
    def test_from_payload_malformed(self, payload):
        """Test that unusable payloads raise MissingPrice."""
        with pytest.raises(MissingPrice):
            PriceObservation.from_payload(payload)


def test_exchange_rate_age():
    updated = datetime(2024, 1, 1, tzinfo=timezone.utc)
    meta = ExchangeRateMeta(rate=2.0, last_updated=updated)
    assert meta.age(updated + timedelta(seconds=5)) == timedelta(seconds=5)


def test_read_cycle_failure_keeps_cause():
    cause = RuntimeError("rpc down")
    error = ReadCycleFailure("approvals", cause)
    assert error.batch == "approvals"
    assert error.cause is cause
    assert str(error) == "approvals batch failed: rpc down"
