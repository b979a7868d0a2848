"""
Immutable value types shared between the pollers, the price stream and the
liquidity quote helpers.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from .errors import MissingPrice


@dataclass(frozen=True)
class ChainStateSnapshot:
    """Point-in-time ledger view for one wallet. All values are raw quantities."""

    account_base_balance: int
    account_quote_balance: int
    pool_base_balance: int
    pool_quote_balance: int
    pool_share_balance: int
    pool_share_supply: int

    @property
    def pool_is_empty(self) -> bool:
        """True when supply or either reserve is zero."""
        return (
            self.pool_share_supply == 0
            or self.pool_base_balance == 0
            or self.pool_quote_balance == 0
        )


@dataclass(frozen=True)
class ApprovalState:
    """Allowances granted by the wallet to the pool contract."""

    base_allowance: int
    quote_allowance: int

    def covers(self, required_base: int, required_quote: int) -> bool:
        return self.base_allowance >= required_base and self.quote_allowance >= required_quote


@dataclass(frozen=True)
class PriceObservation:
    """
    A single price update for one feed.

    price and conf are integers scaled by 10**expo; publish_time is unix seconds.
    """

    price: int
    conf: int
    expo: int
    publish_time: int

    @property
    def price_as_number(self) -> float:
        return self.price * 10.0**self.expo

    def supersedes(self, other: Optional["PriceObservation"]) -> bool:
        """True if this observation should replace other."""
        return other is None or self.publish_time > other.publish_time

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> Tuple[str, "PriceObservation"]:
        """
        Decode a Pyth-style price update.

        Args:
            payload: {"id": ..., "price": {"price", "conf", "expo", "publish_time"}}

        Returns:
            (feed id, observation)

        Raises:
            MissingPrice: If the payload has no usable price
        """
        try:
            feed_id = str(payload["id"])
            price = payload["price"]
            observation = cls(
                price=int(price["price"]),
                conf=int(price.get("conf", 0)),
                expo=int(price["expo"]),
                publish_time=int(price["publish_time"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MissingPrice(f"Malformed price update: {e}") from e
        return feed_id, observation


@dataclass(frozen=True)
class ExchangeRateMeta:
    """Quote-denominated price of one base unit and when it was last updated."""

    rate: float
    last_updated: datetime

    def age(self, now: Optional[datetime] = None) -> timedelta:
        now = now or datetime.now(timezone.utc)
        return now - self.last_updated


@dataclass(frozen=True)
class LiquidityIntent:
    """Amounts entered for a liquidity add, as decimal text."""

    base: str = "0"
    quote: str = "0"


@dataclass(frozen=True)
class RemovalQuote:
    """Estimated payouts for redeeming pool shares."""

    share_qty: int
    payout_base: int
    payout_quote: int
    payout_base_text: str
    payout_quote_text: str
