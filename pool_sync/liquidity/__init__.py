"""
Liquidity quotes, approval gating and add/remove forms.
"""

from .authorization import (
    AuthorizationMachine,
    AuthorizationState,
    PendingApproval,
    is_sufficiently_approved,
    required_amounts,
)
from .forms import AddLiquidityForm, RemoveLiquidityForm
from .quotes import (
    ADD_DISPLAY_PLACES,
    REMOVE_DISPLAY_PLACES,
    Side,
    quote_paired_amount,
    quote_removal,
)

__all__ = [
    "ADD_DISPLAY_PLACES",
    "REMOVE_DISPLAY_PLACES",
    "AddLiquidityForm",
    "AuthorizationMachine",
    "AuthorizationState",
    "PendingApproval",
    "RemoveLiquidityForm",
    "Side",
    "is_sufficiently_approved",
    "quote_paired_amount",
    "quote_removal",
    "required_amounts",
]
