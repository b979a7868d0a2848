"""
Price subscription interface and its NATS relay implementation.

The relay republishes Pyth price updates (Hermes JSON layout) on one subject per
feed, e.g. ``prices.pyth.<feed id>``:

    {"id": "<feed id>",
     "price": {"price": "6140993501", "conf": "3540000", "expo": -8, "publish_time": 1700000000}}
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config.price_service import PriceServiceConfig
from ..config.tokens import normalize_feed_id
from ..core.errors import MissingPrice
from ..core.models import PriceObservation
from ..utils.nats.client import NatsClient

logger = logging.getLogger(__name__)

PriceUpdateHandler = Callable[[str, PriceObservation], None]


class PriceSubscription(ABC):
    """A push source of price observations for a fixed set of feeds."""

    @abstractmethod
    async def subscribe(self, feed_ids: Iterable[str], on_update: PriceUpdateHandler) -> None:
        """
        Start delivering updates for feed_ids to on_update(feed_id, observation).

        Delivery continues for the lifetime of the subscription.
        """
        pass

    async def close(self) -> None:
        """Release the transport at process shutdown."""
        pass


class NatsPriceSubscription(PriceSubscription):
    """Receives relayed Pyth price updates over NATS."""

    def __init__(
        self,
        client: NatsClient,
        subject_prefix: str = "prices.pyth",
    ):
        self.client = client
        self.subject_prefix = subject_prefix
        self.subjects: List[str] = []
        self.messages_received = 0
        self.messages_dropped = 0

    @classmethod
    def from_config(cls, config: PriceServiceConfig) -> "NatsPriceSubscription":
        client = NatsClient(
            env=config.ENVIRONMENT,
            url=config.get_price_service_url(),
            connection_params=config.connection_params,
        )
        return cls(client, subject_prefix=config.PRICE_SUBJECT_PREFIX)

    async def subscribe(self, feed_ids: Iterable[str], on_update: PriceUpdateHandler) -> None:
        if not self.client.is_connected:
            await self.client.aconnect()

        def handle(payload: Dict[str, Any]):
            self._dispatch(payload, on_update)

        for feed_id in feed_ids:
            subject = f"{self.subject_prefix}.{normalize_feed_id(feed_id)}"
            await self.client.asubscribe(subject, handle)
            self.subjects.append(subject)
        logger.info(f"Subscribed to {len(self.subjects)} price feeds on {self.client.url}")

    def _dispatch(self, payload: Any, on_update: PriceUpdateHandler):
        self.messages_received += 1
        try:
            if not isinstance(payload, dict):
                raise MissingPrice(f"Expected an object, got {type(payload).__name__}")
            feed_id, observation = PriceObservation.from_payload(payload)
        except MissingPrice as e:
            self.messages_dropped += 1
            logger.warning(f"Skipping price update: {e}")
            return
        on_update(normalize_feed_id(feed_id), observation)

    async def close(self) -> None:
        await self.client.aclose()


def build_price_subscription(config: Optional[PriceServiceConfig] = None) -> PriceSubscription:
    """Create the configured price subscription."""
    return NatsPriceSubscription.from_config(config or PriceServiceConfig())
