"""
Approval gating for liquidity adds.

The machine compares the wallet's current allowances with the amounts entered
for the add and publishes one of three states:

- UNAUTHORIZED: allowances do not cover the entered amounts
- PENDING_CONFIRMATION: approvals were submitted but no poll has observed them yet
- AUTHORIZED: both allowances cover the entered amounts

It is re-evaluated from scratch on every allowance or intent change, so a
revoked allowance drops it back to UNAUTHORIZED without user action. Sending
approvals never flips it to AUTHORIZED; only a later poll can.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..config.tokens import TokenConfig
from ..core.errors import InvalidFormat, LedgerWriteError
from ..core.models import ApprovalState, LiquidityIntent
from ..core.quantity import decimal_to_raw
from ..core.state_cell import StateCell
from ..ledger.writer import LedgerWriter

logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_TIMEOUT = 120.0


class AuthorizationState(Enum):
    UNAUTHORIZED = "unauthorized"
    PENDING_CONFIRMATION = "pending_confirmation"
    AUTHORIZED = "authorized"


@dataclass(frozen=True)
class PendingApproval:
    """Approvals submitted but not yet observed on the ledger."""

    base: int
    quote: int
    requested_at: float

    def covers(self, required: Tuple[int, int]) -> bool:
        return self.base >= required[0] and self.quote >= required[1]


def required_amounts(
    intent: LiquidityIntent,
    base_token: TokenConfig,
    quote_token: TokenConfig,
) -> Optional[Tuple[int, int]]:
    """Raw (base, quote) amounts of an intent, or None if either is unparseable or zero."""
    try:
        base = decimal_to_raw(intent.base, base_token.decimals)
        quote = decimal_to_raw(intent.quote, quote_token.decimals)
    except InvalidFormat:
        return None
    if base == 0 or quote == 0:
        return None
    return base, quote


def is_sufficiently_approved(
    approvals: Optional[ApprovalState],
    required: Optional[Tuple[int, int]],
) -> bool:
    """Both allowances cover the requirement. Missing allowances count as zero."""
    if required is None or approvals is None:
        return False
    return approvals.covers(*required)


class AuthorizationMachine:
    """Publishes the AuthorizationState for the current intent into self.state."""

    def __init__(
        self,
        approvals: StateCell[Optional[ApprovalState]],
        intent: StateCell[LiquidityIntent],
        base_token: TokenConfig,
        quote_token: TokenConfig,
        writer: Optional[LedgerWriter] = None,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        approval_amount_override: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.base_token = base_token
        self.quote_token = quote_token
        self.writer = writer
        self.confirmation_timeout = confirmation_timeout
        self.approval_amount_override = approval_amount_override
        self._clock = clock
        self._approvals = approvals
        self._intent = intent
        self._pending: Optional[PendingApproval] = None
        self._expiry_handle: Optional[asyncio.TimerHandle] = None
        self.state: StateCell[AuthorizationState] = StateCell(
            AuthorizationState.UNAUTHORIZED, "authorization"
        )
        self._unsubscribers = [
            approvals.subscribe(lambda _: self.evaluate()),
            intent.subscribe(lambda _: self.evaluate()),
        ]
        self.evaluate()

    @property
    def is_authorized(self) -> bool:
        return self.state.value is AuthorizationState.AUTHORIZED

    @property
    def pending(self) -> Optional[PendingApproval]:
        return self._pending

    def required(self) -> Optional[Tuple[int, int]]:
        return required_amounts(self._intent.value, self.base_token, self.quote_token)

    def evaluate(self) -> AuthorizationState:
        """Recompute the state from the current allowances and intent."""
        required = self.required()
        if is_sufficiently_approved(self._approvals.value, required):
            if self._pending is not None:
                logger.info("Approvals confirmed on ledger")
            self._clear_pending()
            state = AuthorizationState.AUTHORIZED
        elif self._pending_covers(required):
            state = AuthorizationState.PENDING_CONFIRMATION
        else:
            state = AuthorizationState.UNAUTHORIZED
        self.state.set(state)
        return state

    def _pending_covers(self, required: Optional[Tuple[int, int]]) -> bool:
        pending = self._pending
        if pending is None or required is None:
            return False
        if self._clock() - pending.requested_at >= self.confirmation_timeout:
            logger.warning(
                f"Approvals not observed within {self.confirmation_timeout}s, giving up on them"
            )
            self._clear_pending()
            return False
        return pending.covers(required)

    def _expire_pending(self):
        self._expiry_handle = None
        if self._pending is not None:
            logger.warning(
                f"Approvals not observed within {self.confirmation_timeout}s, giving up on them"
            )
            self._pending = None
        self.evaluate()

    def _clear_pending(self):
        self._pending = None
        if self._expiry_handle is not None:
            self._expiry_handle.cancel()
            self._expiry_handle = None

    async def request_approval(self, account: str) -> List[str]:
        """
        Submit the base and quote approvals concurrently.

        Moves to PENDING_CONFIRMATION; AUTHORIZED follows only once a poll
        observes the new allowances.

        Returns:
            Hashes of the submitted approve transactions; empty if there was
            nothing to approve
        """
        if self.writer is None:
            raise LedgerWriteError("No ledger writer configured")
        required = self.required()
        if required is None:
            logger.warning("Nothing to approve: enter non-zero base and quote amounts first")
            return []
        if self.is_authorized:
            logger.debug("Allowances already cover the intent")
            return []

        amount_base = self.approval_amount_override or required[0]
        amount_quote = self.approval_amount_override or required[1]

        self._clear_pending()
        self._pending = PendingApproval(amount_base, amount_quote, self._clock())
        self._expiry_handle = asyncio.get_running_loop().call_later(
            self.confirmation_timeout, self._expire_pending
        )
        self.evaluate()

        results = await asyncio.gather(
            self.writer.approve(account, self.base_token.address, amount_base),
            self.writer.approve(account, self.quote_token.address, amount_quote),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            self._clear_pending()
            self.evaluate()
            for failure in failures:
                if not isinstance(failure, LedgerWriteError):
                    raise failure
                logger.error(f"Approval request failed: {failure}")
        return [r for r in results if isinstance(r, str)]

    def close(self):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._clear_pending()
