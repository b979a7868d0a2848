"""
Cross rate between the base and quote tokens.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from ..config.tokens import normalize_feed_id
from ..core.models import ExchangeRateMeta, PriceObservation
from ..core.state_cell import StateCell

logger = logging.getLogger(__name__)


def derive_exchange_rate(
    prices: Mapping[str, PriceObservation],
    base_feed_id: str,
    quote_feed_id: str,
) -> Optional[ExchangeRateMeta]:
    """
    Quote-denominated price of one base unit.

    Returns None when either observation is missing or the quote price is zero;
    callers must treat that as unknown, never as a rate of 0 or 1.
    """
    base = prices.get(normalize_feed_id(base_feed_id))
    quote = prices.get(normalize_feed_id(quote_feed_id))
    if base is None or quote is None:
        return None

    quote_price = quote.price_as_number
    if quote_price == 0:
        logger.warning(f"Quote feed {quote_feed_id} reports a zero price, rate unknown")
        return None

    last_updated = datetime.fromtimestamp(
        max(base.publish_time, quote.publish_time), tz=timezone.utc
    )
    return ExchangeRateMeta(rate=base.price_as_number / quote_price, last_updated=last_updated)


class ExchangeRateTracker:
    """Recomputes the rate into its own cell whenever the price map changes."""

    def __init__(
        self,
        prices: StateCell[Mapping[str, PriceObservation]],
        base_feed_id: str,
        quote_feed_id: str,
    ):
        self.base_feed_id = normalize_feed_id(base_feed_id)
        self.quote_feed_id = normalize_feed_id(quote_feed_id)
        self._prices = prices
        self.rate: StateCell[Optional[ExchangeRateMeta]] = StateCell(None, "exchange_rate")
        self._unsubscribe: Optional[Callable[[], None]] = prices.subscribe(self._recompute)
        self._recompute(prices.value)

    def _recompute(self, prices: Mapping[str, PriceObservation]):
        self.rate.set(derive_exchange_rate(prices, self.base_feed_id, self.quote_feed_id))

    def close(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
