"""
Core value types, errors and quantity conversions for pool_sync.
"""

from .errors import (
    InsufficientShares,
    InvalidFormat,
    LedgerReadError,
    LedgerWriteError,
    MissingPrice,
    MissingRate,
    NotAuthorized,
    PoolEmpty,
    PoolSyncError,
    ReadCycleFailure,
)
from .models import (
    ApprovalState,
    ChainStateSnapshot,
    ExchangeRateMeta,
    LiquidityIntent,
    PriceObservation,
    RemovalQuote,
)
from .quantity import (
    decimal_to_raw,
    format_raw,
    is_decimal_text,
    raw_to_decimal,
    raw_to_decimal_text,
)
from .state_cell import StateCell

__all__ = [
    "ApprovalState",
    "ChainStateSnapshot",
    "ExchangeRateMeta",
    "InsufficientShares",
    "InvalidFormat",
    "LedgerReadError",
    "LedgerWriteError",
    "LiquidityIntent",
    "MissingPrice",
    "MissingRate",
    "NotAuthorized",
    "PoolEmpty",
    "PoolSyncError",
    "PriceObservation",
    "ReadCycleFailure",
    "RemovalQuote",
    "StateCell",
    "decimal_to_raw",
    "format_raw",
    "is_decimal_text",
    "raw_to_decimal",
    "raw_to_decimal_text",
]
