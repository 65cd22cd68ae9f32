"""Combo status transitions driven by market resolution and owner cancel.

Status rules:
  - any resolved leg lost            -> LOST (sticky)
  - every leg resolved, none lost    -> WON
  - otherwise, some leg resolved     -> PARTIALLY_RESOLVED
  - CANCELLED only from ACTIVE while no leg has resolved
"""

from src.pm_common.enums import ComboStatus
from src.pm_common.errors import (
    ComboNotCancellableError,
    NotAuthorizedError,
    PartialResolutionPreventsCancelError,
)
from src.pm_combo.domain.models import Combo


def _recompute_status(combo: Combo) -> ComboStatus:
    if any(leg.resolved and leg.won is False for leg in combo.legs):
        return ComboStatus.LOST
    if all(leg.resolved for leg in combo.legs):
        return ComboStatus.WON
    return ComboStatus.PARTIALLY_RESOLVED


def apply_market_outcome(combo: Combo, market_id: int, outcome: bool) -> bool:
    """Settle every unresolved leg on market_id. Returns True if combo changed."""
    if not combo.is_open:
        return False
    updated = False
    for leg in combo.legs:
        if leg.market_id == market_id and not leg.resolved:
            leg.resolved = True
            leg.won = leg.prediction == outcome
            updated = True
    if updated:
        combo.status = _recompute_status(combo)
    return updated


def cancel(combo: Combo, caller: str) -> None:
    if combo.owner != caller:
        raise NotAuthorizedError(f"Only the owner can cancel combo {combo.id}")
    if any(leg.resolved for leg in combo.legs):
        raise PartialResolutionPreventsCancelError(combo.id)
    if combo.status != ComboStatus.ACTIVE:
        raise ComboNotCancellableError(combo.id, combo.status.value)
    combo.status = ComboStatus.CANCELLED
