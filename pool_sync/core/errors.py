"""
Exception classes for pool_sync.

None of these are fatal to the process: the poller logs and retries on its next
tick, and quote/form helpers turn them into "unavailable" results.
"""

from typing import Optional


class PoolSyncError(Exception):
    """Base exception for pool_sync."""
    pass


class InvalidFormat(PoolSyncError, ValueError):
    """Raised when a decimal entry does not match the accepted number format."""
    pass


class LedgerReadError(PoolSyncError):
    """Raised when a single ledger read fails."""
    pass


class LedgerWriteError(PoolSyncError):
    """Raised when a transaction cannot be submitted."""
    pass


class ReadCycleFailure(PoolSyncError):
    """Raised when any read of a poll batch fails; the whole batch is discarded."""

    def __init__(self, batch: str, cause: Optional[BaseException] = None):
        message = f"{batch} batch failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.batch = batch
        self.cause = cause


class MissingPrice(PoolSyncError):
    """Raised when a price observation needed for a computation is absent."""
    pass


class MissingRate(PoolSyncError):
    """Raised when an action needs the exchange rate and none is known."""
    pass


class PoolEmpty(PoolSyncError):
    """Raised when pool supply or a reserve is zero."""
    pass


class NotAuthorized(PoolSyncError):
    """Raised when liquidity is added before both allowances are confirmed."""
    pass


class InsufficientShares(PoolSyncError):
    """Raised when a redemption exceeds the wallet's pool-share balance."""
    pass
