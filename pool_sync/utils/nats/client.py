import functools
import logging
from typing import Any, Callable, Dict, List, Optional

import nats
from nats.aio.client import Client as NATS
from nats.aio.subscription import Msg, Subscription

from .json_helpers import loads

logger = logging.getLogger(__name__)

DEFAULT_NATS_URLS = {
    "local": "nats://localhost:4222",
    "dev": "nats://nats:4222",
    "production": "nats://nats-server:4222",
}


def _get_nats_url(env: str) -> str:
    """Get NATS URL for the specified environment"""
    return DEFAULT_NATS_URLS.get(env, DEFAULT_NATS_URLS["local"])


class NatsClient:
    """
    A small NATS client for JSON-encoded push messages.
    Methods starting with 'a' execute asynchronously.
    """

    def __init__(
        self,
        env: str = "local",
        url: Optional[str] = None,
        connection_params: Optional[Dict[str, Any]] = None,
    ):
        self.url = url or _get_nats_url(env)
        self.connection_params = dict(connection_params or {})
        self.connection_params.pop("servers", None)
        self.nc: Optional[NATS] = None
        self._subscriptions: List[Subscription] = []

    @property
    def is_connected(self) -> bool:
        return self.nc is not None and self.nc.is_connected

    # Connection methods
    async def aconnect(self):
        """Asynchronously connect to NATS server"""
        logger.info(f"Connecting to NATS at {self.url}")
        self.nc = await nats.connect(servers=[self.url], **self.connection_params)
        logger.info(f"Connected to NATS at {self.url}")

    async def aclose(self):
        """Asynchronously drain subscriptions and close the connection"""
        if self.nc:
            await self.nc.close()
            self.nc = None
            self._subscriptions.clear()
            logger.info(f"Closed NATS connection to {self.url}")

    # Subscription methods
    async def asubscribe(self, subject: str, callback_hdlr: Callable[[Any], None]) -> Subscription:
        """Asynchronously subscribe to a subject with a JSON-decoding callback"""
        if not self.nc:
            raise ConnectionError("Not connected to NATS server")
        wrapped_callback = functools.partial(
            self.subscribe_cb_wrapper, callback_hdlr=callback_hdlr
        )
        sub = await self.nc.subscribe(subject, cb=wrapped_callback)
        self._subscriptions.append(sub)
        logger.debug(f"Subscribed to {subject}")
        return sub

    # Callback wrappers
    async def subscribe_cb_wrapper(
        self, msg: Msg, callback_hdlr: Callable[[Any], None]
    ):
        """Wrapper for subscription callbacks to handle JSON decoding"""
        try:
            decoded_msg = loads(msg.data)
        except ValueError as e:
            logger.warning(f"Dropping undecodable message on {msg.subject}: {e}")
            return
        callback_hdlr(decoded_msg)
