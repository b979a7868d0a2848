"""
Latest price per tracked feed.

Uses the unchecked price: no staleness check is applied to observations, since
updates come from a live push subscription and are recent by construction.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ..config.tokens import normalize_feed_id
from ..core.models import PriceObservation
from ..core.state_cell import StateCell
from .subscription import PriceSubscription

logger = logging.getLogger(__name__)


class PriceStreamAggregator:
    """
    Merges pushed observations into a read-only feed id -> observation map.

    Each update replaces exactly one key, and only with a newer publish time.
    Readers must handle either feed being absent, e.g. before the first push.
    """

    def __init__(self, subscription: PriceSubscription, feed_ids: Iterable[str]):
        self.subscription = subscription
        self.feed_ids = tuple(normalize_feed_id(f) for f in feed_ids)
        self.prices: StateCell[Mapping[str, PriceObservation]] = StateCell(
            MappingProxyType({}), "prices"
        )
        self._started = False
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def start(self):
        """Open the long-lived subscription. Calling it again does nothing."""
        if self._started:
            return
        self._started = True
        try:
            await self.subscription.subscribe(self.feed_ids, self.on_update)
        except Exception:
            self._started = False
            raise
        self.logger.info(f"Price stream started for {len(self.feed_ids)} feeds")

    async def close(self):
        await self.subscription.close()
        self._started = False

    def on_update(self, feed_id: str, observation: PriceObservation):
        feed_id = normalize_feed_id(feed_id)
        if feed_id not in self.feed_ids:
            self.logger.debug(f"Ignoring update for untracked feed {feed_id}")
            return

        current = self.prices.value
        if not observation.supersedes(current.get(feed_id)):
            return

        merged = dict(current)
        merged[feed_id] = observation
        self.prices.set(MappingProxyType(merged))

    def get(self, feed_id: str) -> Optional[PriceObservation]:
        return self.prices.value.get(normalize_feed_id(feed_id))
