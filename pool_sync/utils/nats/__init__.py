"""
NATS client utilities for pool_sync.

The price relay publishes Pyth price updates as JSON on NATS subjects; this
package provides the subscribing client.
"""

from .client import NatsClient
from .json_helpers import loads

__all__ = ["NatsClient", "loads"]
