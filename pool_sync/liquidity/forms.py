"""
Add and remove liquidity forms.

These hold what the user has entered and decide which actions are available,
reading the latest chain state, allowances and rate from their cells. They do
not render anything.
"""

import logging
from typing import Optional

from ..config.tokens import TokenConfig
from ..core.errors import (
    InsufficientShares,
    InvalidFormat,
    LedgerWriteError,
    MissingRate,
    NotAuthorized,
    PoolEmpty,
)
from ..core.models import ApprovalState, ChainStateSnapshot, ExchangeRateMeta, LiquidityIntent, RemovalQuote
from ..core.quantity import NUMBER_PATTERN, decimal_to_raw, raw_to_decimal_text
from ..core.state_cell import StateCell
from ..ledger.writer import LedgerWriter
from .authorization import AuthorizationMachine, AuthorizationState
from .quotes import Side, quote_paired_amount, quote_removal

logger = logging.getLogger(__name__)


class AddLiquidityForm:
    """Base/quote amounts for an add, kept paired through the oracle rate."""

    def __init__(
        self,
        base_token: TokenConfig,
        quote_token: TokenConfig,
        chain_state: StateCell[Optional[ChainStateSnapshot]],
        approvals: StateCell[Optional[ApprovalState]],
        rate: StateCell[Optional[ExchangeRateMeta]],
        writer: Optional[LedgerWriter] = None,
        confirmation_timeout: Optional[float] = None,
        approval_amount_override: Optional[int] = None,
    ):
        self.base_token = base_token
        self.quote_token = quote_token
        self.writer = writer
        self._chain_state = chain_state
        self._rate = rate
        self.intent: StateCell[LiquidityIntent] = StateCell(LiquidityIntent(), "add_intent")

        machine_kwargs = {"approval_amount_override": approval_amount_override}
        if confirmation_timeout is not None:
            machine_kwargs["confirmation_timeout"] = confirmation_timeout
        self.authorization = AuthorizationMachine(
            approvals, self.intent, base_token, quote_token, writer=writer, **machine_kwargs
        )

    @property
    def rate(self) -> Optional[float]:
        meta = self._rate.value
        return meta.rate if meta is not None else None

    @property
    def can_autofill(self) -> bool:
        """The paired side is only filled in once a rate is known."""
        return self.rate is not None

    @property
    def can_approve(self) -> bool:
        return (
            self.authorization.state.value is AuthorizationState.UNAUTHORIZED
            and self.authorization.required() is not None
        )

    @property
    def can_submit(self) -> bool:
        return self.rate is not None and self.authorization.is_authorized

    def _token(self, side: Side) -> TokenConfig:
        return self.base_token if side is Side.BASE else self.quote_token

    def set_amount(self, side: Side, text: str) -> bool:
        """
        Store an entered amount and auto-fill the other side.

        Text that cannot be the start of a decimal number is rejected and
        nothing changes.
        An empty entry clears the field without touching the other side.

        Returns:
            True if the entry was accepted
        """
        if not NUMBER_PATTERN.fullmatch(text):
            logger.debug(f"Rejected {side.value} entry {text!r}")
            return False

        current = self.intent.value
        values = {"base": current.base, "quote": current.quote}
        values[side.value] = text

        paired = quote_paired_amount(text, self._token(side), self.rate, side) if text else None
        if paired is not None:
            values[side.other.value] = paired

        self.intent.set(LiquidityIntent(**values))
        return True

    def set_base(self, text: str) -> bool:
        return self.set_amount(Side.BASE, text)

    def set_quote(self, text: str) -> bool:
        return self.set_amount(Side.QUOTE, text)

    def fill_base_from_balance(self) -> bool:
        """Enter the whole wallet base balance."""
        snapshot = self._chain_state.value
        if snapshot is None or not snapshot.account_base_balance:
            return False
        return self.set_base(raw_to_decimal_text(snapshot.account_base_balance, self.base_token.decimals))

    def fill_quote_from_balance(self) -> bool:
        """Enter the whole wallet quote balance."""
        snapshot = self._chain_state.value
        if snapshot is None or not snapshot.account_quote_balance:
            return False
        return self.set_quote(raw_to_decimal_text(snapshot.account_quote_balance, self.quote_token.decimals))

    async def request_approval(self, account: str):
        return await self.authorization.request_approval(account)

    async def submit(self, account: str) -> str:
        """
        Send addLiquidity for the entered amounts.

        Raises:
            MissingRate: If no rate is known
            NotAuthorized: If the allowances do not cover the amounts
        """
        if self.writer is None:
            raise LedgerWriteError("No ledger writer configured")
        if self.rate is None:
            raise MissingRate("Exchange rate unknown, cannot add liquidity")
        required = self.authorization.required()
        if required is None or not self.authorization.is_authorized:
            raise NotAuthorized(f"Add not authorized (state={self.authorization.state.value})")
        return await self.writer.add_liquidity(account, *required)

    def close(self):
        self.authorization.close()


class RemoveLiquidityForm:
    """Pool shares to redeem and the estimated payouts."""

    def __init__(
        self,
        base_token: TokenConfig,
        quote_token: TokenConfig,
        chain_state: StateCell[Optional[ChainStateSnapshot]],
        writer: Optional[LedgerWriter] = None,
    ):
        self.base_token = base_token
        self.quote_token = quote_token
        # pool shares are denominated with the base token's decimals
        self.share_decimals = base_token.decimals
        self.writer = writer
        self._chain_state = chain_state
        self.shares: StateCell[str] = StateCell("0", "remove_shares")

    @property
    def is_available(self) -> bool:
        """False when the pool is empty or the wallet holds no shares."""
        snapshot = self._chain_state.value
        return (
            snapshot is not None
            and not snapshot.pool_is_empty
            and snapshot.pool_share_balance > 0
        )

    def set_shares(self, text: str) -> bool:
        if not NUMBER_PATTERN.fullmatch(text):
            return False
        self.shares.set(text)
        return True

    def fill_max(self) -> bool:
        """Enter the whole wallet pool-share balance."""
        snapshot = self._chain_state.value
        if snapshot is None or not snapshot.pool_share_balance:
            return False
        return self.set_shares(raw_to_decimal_text(snapshot.pool_share_balance, self.share_decimals))

    def share_qty(self) -> Optional[int]:
        try:
            return decimal_to_raw(self.shares.value, self.share_decimals)
        except InvalidFormat:
            return None

    def quote(self) -> Optional[RemovalQuote]:
        """Estimated payouts, or None when unavailable."""
        qty = self.share_qty()
        if not qty:
            return None
        try:
            return quote_removal(qty, self._chain_state.value, self.base_token, self.quote_token)
        except (PoolEmpty, InsufficientShares) as e:
            logger.debug(f"Removal quote unavailable: {e}")
            return None

    async def submit(self, account: str) -> str:
        """
        Send removeLiquidity for the entered shares.

        Raises:
            PoolEmpty: If the pool is empty or state is unknown
            InsufficientShares: If the shares exceed the wallet balance
        """
        if self.writer is None:
            raise LedgerWriteError("No ledger writer configured")
        snapshot = self._chain_state.value
        if snapshot is None or snapshot.pool_is_empty:
            raise PoolEmpty("Pool is empty")
        qty = self.share_qty()
        if not qty:
            raise InvalidFormat(f"Not a redeemable share quantity: {self.shares.value!r}")
        if qty > snapshot.pool_share_balance:
            raise InsufficientShares(
                f"Wallet holds {snapshot.pool_share_balance} shares, cannot redeem {qty}"
            )
        return await self.writer.remove_liquidity(account, qty)
