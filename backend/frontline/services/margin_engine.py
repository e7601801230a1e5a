"""
Margin reconciler — keeps system cost, gross margin and price consistent.

The three fields are over-determined: any two fix the third.  Which two are
authoritative is decided by ``last_edited``:

  cost / margin edited  ->  price  = round(cost / max(1 - GM, 0.01)),  GM clamped to [0.05, 0.90]
  price edited          ->  GM     = clamp((price - cost) / max(price, 1), 0, 0.95)

``reconcile`` is a pure reducer and is idempotent: reconciling an already
reconciled triad returns an equal triad.
"""

import logging
from dataclasses import dataclass, replace
from typing import Tuple

from frontline import config
from frontline.models.pricing_schema import EditedField
from frontline.services.numeric import clamp, round_half_up, to_number

logger = logging.getLogger("frontline-pricing.margin")


@dataclass(frozen=True)
class SystemTriad:
    cost: float
    margin: float
    price: int
    last_edited: EditedField = EditedField.PRICE


# ---------------------------------------------------------------------------
# Shared formulas
# ---------------------------------------------------------------------------

def price_from_margin(cost: float, margin: float) -> int:
    """Price that yields ``margin`` GM on ``cost``, rounded to whole currency units."""
    return round_half_up(cost / max(1.0 - margin, config.MIN_PRICE_DENOMINATOR))


def margin_from_price(price: float, cost: float) -> float:
    """GM implied by a directly entered price, clamped to [0, 0.95]."""
    gm = (price - cost) / max(price, config.MIN_PRICE_FOR_MARGIN)
    return clamp(gm, config.DERIVED_MARGIN_MIN, config.DERIVED_MARGIN_MAX)


def clamp_target_margin(margin: float) -> float:
    return clamp(margin, config.MARGIN_MIN, config.MARGIN_MAX)


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------

def reconcile(triad: SystemTriad) -> SystemTriad:
    """Derive the non-authoritative field of ``triad`` from the other two."""
    if triad.last_edited == EditedField.PRICE:
        price = round_half_up(triad.price)
        return replace(triad, price=price, margin=margin_from_price(price, triad.cost))

    margin = clamp_target_margin(triad.margin)
    return replace(triad, margin=margin, price=price_from_margin(triad.cost, margin))


def apply_edit(triad: SystemTriad, field: EditedField, value) -> SystemTriad:
    """
    Apply one user edit to the triad and reconcile.

    ``value`` is raw input; unparseable values coerce to 0.
    """
    field = EditedField(field)
    number = to_number(value)
    if field == EditedField.COST:
        edited = replace(triad, cost=number, last_edited=field)
    elif field == EditedField.MARGIN:
        edited = replace(triad, margin=number, last_edited=field)
    else:
        edited = replace(triad, price=number, last_edited=field)
    result = reconcile(edited)
    logger.debug(
        f"{field.value} edit -> cost={result.cost} gm={result.margin:.4f} price={result.price}",
        extra={"event": f"edit_{field.value}", "last_edited": field.value},
    )
    return result


def apply_preset(triad: SystemTriad, preset_key: str) -> Tuple[SystemTriad, float]:
    """
    Apply a GM preset (e.g. "Residential 50% GM").

    Counts as a margin edit on the system; also returns the preset's adder GM
    so the caller can set the shared add-on margin in the same action.
    """
    try:
        _label, system_gm, adder_gm = config.GM_PRESETS[preset_key]
    except KeyError:
        raise ValueError(f"Unknown GM preset '{preset_key}'") from None
    return apply_edit(triad, EditedField.MARGIN, system_gm), adder_gm


def initial_triad(cost: float, margin: float = config.DEFAULT_SYSTEM_GM) -> SystemTriad:
    """Factory triad: price seeded from cost at ``margin``, price treated as last edited."""
    margin = clamp_target_margin(margin)
    return reconcile(SystemTriad(
        cost=cost,
        margin=margin,
        price=price_from_margin(cost, margin),
        last_edited=EditedField(config.DEFAULT_LAST_EDITED),
    ))
