"""
Ledger access for pool_sync: eth_call reads, transaction submission and the
fixed-interval state poller.
"""

from .poller import DEFAULT_POLL_INTERVAL, LedgerStatePoller
from .reader import LedgerReader, encode_call
from .writer import LedgerWriter

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "LedgerReader",
    "LedgerStatePoller",
    "LedgerWriter",
    "encode_call",
]
