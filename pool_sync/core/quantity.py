"""
Conversions between human-entered decimal text and raw token quantities.

Raw quantities are plain ints in a token's base units. Floats are only produced
for display; anything sent back to the ledger goes through decimal_to_raw.
"""

import re
from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext

from .errors import InvalidFormat

NUMBER_PATTERN = re.compile(r"[0-9]*\.?[0-9]*")


def is_decimal_text(text: str) -> bool:
    """True if text is digits with at most one '.', and has at least one digit."""
    return bool(text) and bool(NUMBER_PATTERN.fullmatch(text)) and any(c.isdigit() for c in text)


def decimal_to_raw(text: str, decimals: int) -> int:
    """
    Convert decimal text to a raw quantity, truncating extra fractional digits.

    Args:
        text: Decimal string such as "1.5", ".25" or "3."
        decimals: Token decimal precision

    Returns:
        Non-negative integer quantity in base units

    Raises:
        InvalidFormat: If text is empty or not a plain decimal number
    """
    if not isinstance(text, str) or not is_decimal_text(text):
        raise InvalidFormat(f"Not a decimal quantity: {text!r}")
    with localcontext() as ctx:
        # exact arithmetic for any uint256-sized entry
        ctx.prec = len(text) + decimals + 2
        try:
            value = Decimal(text)
        except InvalidOperation as e:
            raise InvalidFormat(f"Not a decimal quantity: {text!r}") from e
        return int(value.scaleb(decimals).to_integral_value(rounding=ROUND_DOWN))


def raw_to_decimal(qty: int, decimals: int) -> float:
    """Convert a raw quantity to a float for display. Lossy above double precision."""
    return qty / 10**decimals


def raw_to_decimal_text(qty: int, decimals: int) -> str:
    """Exact decimal text of a raw quantity, without trailing zeros."""
    if qty < 0:
        raise ValueError(f"Raw quantity cannot be negative: {qty}")
    whole, frac = divmod(qty, 10**decimals)
    if decimals == 0 or frac == 0:
        return str(whole)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_text}"


def format_raw(qty: int, decimals: int, places: int) -> str:
    """Format a raw quantity with a fixed number of fractional digits, rounding down."""
    with localcontext() as ctx:
        ctx.prec = len(str(qty)) + decimals + places + 2
        value = Decimal(qty).scaleb(-decimals)
        return str(value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_DOWN))
