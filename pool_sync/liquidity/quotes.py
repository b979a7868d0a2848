"""
Liquidity quotes.

Add mode pairs one side's entered amount with the other through the oracle rate.
Remove mode pays out reserves in proportion to the redeemed share of supply.
"""

from enum import Enum
from typing import Optional

from ..config.tokens import TokenConfig
from ..core.errors import InsufficientShares, InvalidFormat, PoolEmpty
from ..core.models import ChainStateSnapshot, RemovalQuote
from ..core.quantity import decimal_to_raw, format_raw, raw_to_decimal

ADD_DISPLAY_PLACES = 3
REMOVE_DISPLAY_PLACES = 6


class Side(Enum):
    BASE = "base"
    QUOTE = "quote"

    @property
    def other(self) -> "Side":
        return Side.QUOTE if self is Side.BASE else Side.BASE


def quote_paired_amount(
    entered_text: str,
    entered_token: TokenConfig,
    rate: Optional[float],
    entered_side: Side,
) -> Optional[str]:
    """
    Amount for the other side of an add, formatted with 3 fractional digits.

    Base amounts are multiplied by the rate, quote amounts divided by it.
    Returns None, meaning leave the paired field untouched, when the text is
    not a number, is zero, or the rate is unknown.
    """
    if rate is None or rate <= 0:
        return None
    try:
        raw = decimal_to_raw(entered_text, entered_token.decimals)
    except InvalidFormat:
        return None
    if raw == 0:
        return None

    amount = raw_to_decimal(raw, entered_token.decimals)
    paired = amount * rate if entered_side is Side.BASE else amount / rate
    return f"{paired:.{ADD_DISPLAY_PLACES}f}"


def quote_removal(
    share_qty: int,
    chain_state: Optional[ChainStateSnapshot],
    base_token: TokenConfig,
    quote_token: TokenConfig,
) -> RemovalQuote:
    """
    Proportional payout for redeeming share_qty pool shares.

    payout = reserve * share_qty // supply, applied to both reserves.
    Payout text is truncated to 6 places rather than rounded, so the shown
    amount never exceeds what the floor-divided on-chain payout delivers.

    Raises:
        PoolEmpty: If there is no snapshot, or supply or either reserve is zero
        InsufficientShares: If share_qty exceeds total supply
    """
    if share_qty < 0:
        raise ValueError(f"Share quantity cannot be negative: {share_qty}")
    if chain_state is None:
        raise PoolEmpty("No pool state available")
    if chain_state.pool_is_empty:
        raise PoolEmpty(
            f"Pool is empty (supply={chain_state.pool_share_supply}, "
            f"reserves={chain_state.pool_base_balance}/{chain_state.pool_quote_balance})"
        )
    supply = chain_state.pool_share_supply
    if share_qty > supply:
        raise InsufficientShares(f"Cannot redeem {share_qty} shares of a {supply} supply")

    payout_base = chain_state.pool_base_balance * share_qty // supply
    payout_quote = chain_state.pool_quote_balance * share_qty // supply
    return RemovalQuote(
        share_qty=share_qty,
        payout_base=payout_base,
        payout_quote=payout_quote,
        payout_base_text=format_raw(payout_base, base_token.decimals, REMOVE_DISPLAY_PLACES),
        payout_quote_text=format_raw(payout_quote, quote_token.decimals, REMOVE_DISPLAY_PLACES),
    )
