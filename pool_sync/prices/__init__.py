"""
Off-chain price stream for pool_sync.
"""

from .aggregator import PriceStreamAggregator
from .exchange_rate import ExchangeRateTracker, derive_exchange_rate
from .subscription import (
    NatsPriceSubscription,
    PriceSubscription,
    PriceUpdateHandler,
    build_price_subscription,
)

__all__ = [
    "ExchangeRateTracker",
    "NatsPriceSubscription",
    "PriceStreamAggregator",
    "PriceSubscription",
    "PriceUpdateHandler",
    "build_price_subscription",
    "derive_exchange_rate",
]
