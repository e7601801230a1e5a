"""
Add-on resolver — effective size, cost and price for each optional add-on.

Effective size is the add-on's explicit override if set, otherwise the
system size.  Solar and UPS are flat and sizeless.  Price uses the shared
adder GM, never the system GM.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from frontline.models.pricing_schema import Adder, Family, Size
from frontline.services.margin_engine import price_from_margin
from frontline.services.reference_store import FLAT_ADDERS, ReferenceDataStore, adder_sizes

logger = logging.getLogger("frontline-pricing.adders")

STATUS_OVERRIDDEN = "Overridden"
STATUS_FOLLOWING = "Following system"


@dataclass(frozen=True)
class AdderSelection:
    """User-facing toggle + size override for one add-on."""
    enabled: bool = False
    size_override: Optional[Size] = None


@dataclass(frozen=True)
class AdderQuote:
    adder: Adder
    enabled: bool
    effective_size: Optional[Size]
    cost: float
    price: int
    size_status: Optional[str]


def validate_size_override(adder: Adder, size: Optional[Size]) -> Optional[Size]:
    """
    Check ``size`` is a legal override for ``adder`` and return it normalised.

    Raises ValueError for a sized override on a flat add-on, or a size the
    add-on's table does not carry (only Foam has XL).
    """
    if size is None:
        return None
    adder = Adder(adder)
    size = Size(size)
    allowed = adder_sizes(adder)
    if not allowed:
        raise ValueError(f"Add-on '{adder.value}' is flat and takes no size override")
    if size not in allowed:
        raise ValueError(f"Size '{size.value}' is not offered for add-on '{adder.value}'")
    return size


def resolve_adder(
    adder: Adder,
    selection: AdderSelection,
    family: Family,
    system_size: Size,
    store: ReferenceDataStore,
    adder_margin: float,
) -> AdderQuote:
    """
    Resolve one add-on against the current system and tables.

    Disabled add-ons resolve to zero cost and price; their effective size
    is still reported so the UI can show what would be quoted.
    """
    adder = Adder(adder)
    if adder in FLAT_ADDERS:
        effective_size = None
        status = None
    else:
        effective_size = selection.size_override or Size(system_size)
        status = STATUS_OVERRIDDEN if selection.size_override is not None else STATUS_FOLLOWING

    if not selection.enabled:
        return AdderQuote(adder, False, effective_size, 0.0, 0, status)

    cost = store.adder_cost(adder, family, effective_size)
    return AdderQuote(
        adder=adder,
        enabled=True,
        effective_size=effective_size,
        cost=cost,
        price=price_from_margin(cost, adder_margin),
        size_status=status,
    )


def resolve_adders(
    selections: Mapping[Adder, AdderSelection],
    family: Family,
    system_size: Size,
    store: ReferenceDataStore,
    adder_margin: float,
) -> Dict[Adder, AdderQuote]:
    """Resolve every add-on, in catalogue order."""
    return {
        adder: resolve_adder(adder, selections[adder], family, system_size, store, adder_margin)
        for adder in Adder
    }
