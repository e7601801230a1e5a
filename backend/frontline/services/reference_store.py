"""
ReferenceDataStore — editable cost / price tables for the pricing engines.

Holds every table the quote depends on as a flat mapping keyed by tuples:

  system_default_cost   family                      -> money
  adder_cost            (adder, family|None, size|None) -> money
  ase_base              (family, size)              -> money
  ase_increment         (family, size, adder)       -> money
  subscription_base     family                      -> money / month

Tables are seeded from ``frontline.config`` and may be point-edited by the
user.  The key space is fixed at construction: an edit may replace any
existing cell but never add or remove one, so every reachable lookup stays
populated.
"""

import logging
from typing import Dict, Optional, Tuple

from frontline import config
from frontline.models.pricing_schema import Adder, Family, Size, SYSTEM_SIZES
from frontline.services.numeric import to_number

logger = logging.getLogger("frontline-pricing.store")


# ---------------------------------------------------------------------------
# Table shapes
# ---------------------------------------------------------------------------

FAMILY_KEYED_ADDERS = frozenset({Adder.BOOSTER, Adder.POOL})
FLAT_ADDERS = frozenset({Adder.SOLAR, Adder.UPS})
FOAM_SIZES = (Size.S, Size.M, Size.L, Size.XL)

# Add-ons that carry an ASE increment (UPS excluded)
ASE_ADDERS = (Adder.FOAM, Adder.BOOSTER, Adder.POOL, Adder.SOLAR)

AdderKey = Tuple[Adder, Optional[Family], Optional[Size]]


def adder_sizes(adder: Adder) -> Tuple[Size, ...]:
    """Sizes an add-on's cost table is keyed by; empty for flat add-ons."""
    if adder in FLAT_ADDERS:
        return ()
    if adder == Adder.FOAM:
        return FOAM_SIZES
    return SYSTEM_SIZES


def adder_cost_key(adder: Adder, family: Family, size: Optional[Size]) -> AdderKey:
    """Normalise (adder, family, size) to the key shape of its cost table."""
    adder = Adder(adder)
    if adder in FLAT_ADDERS:
        return (adder, None, None)
    if size is None:
        raise KeyError(f"Add-on '{adder.value}' needs a size for its cost lookup")
    if adder in FAMILY_KEYED_ADDERS:
        return (adder, Family(family), Size(size))
    return (adder, None, Size(size))


def _factory_adder_costs() -> Dict[AdderKey, float]:
    table: Dict[AdderKey, float] = {}
    for size, cost in config.FOAM_COST.items():
        table[(Adder.FOAM, None, Size(size))] = cost
    for adder, source in ((Adder.BOOSTER, config.BOOSTER_COST), (Adder.POOL, config.POOL_COST)):
        for family, by_size in source.items():
            for size, cost in by_size.items():
                table[(adder, Family(family), Size(size))] = cost
    table[(Adder.SOLAR, None, None)] = config.SOLAR_FLAT_COST
    table[(Adder.UPS, None, None)] = config.UPS_FLAT_COST
    return table


def _factory_ase_base() -> Dict[Tuple[Family, Size], float]:
    return {
        (Family(family), Size(size)): amount
        for family, by_size in config.ASE_BASE.items()
        for size, amount in by_size.items()
    }


def _factory_ase_increments() -> Dict[Tuple[Family, Size, Adder], float]:
    return {
        (Family(family), Size(size), Adder(adder)): amount
        for family, by_size in config.ASE_INCREMENTS.items()
        for size, by_adder in by_size.items()
        for adder, amount in by_adder.items()
    }


class ReferenceDataStore:
    """
    Mutable reference tables for one quote session.

    ``default_costs`` overrides the per-family default system cost
    (e.g. once the LV2 figure is confirmed); it becomes the baseline that
    ``reset()`` restores.
    """

    def __init__(self, default_costs: Optional[Dict[str, float]] = None) -> None:
        baseline = config.default_system_costs()
        for family, cost in (default_costs or {}).items():
            baseline[Family(family).value] = to_number(cost)
        self._baseline_default_costs: Dict[Family, float] = {
            Family(family): cost for family, cost in baseline.items()
        }
        self.reset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Restore every table to its factory values."""
        self.system_default_cost: Dict[Family, float] = dict(self._baseline_default_costs)
        self.adder_cost_table: Dict[AdderKey, float] = _factory_adder_costs()
        self.ase_base_table: Dict[Tuple[Family, Size], float] = _factory_ase_base()
        self.ase_increment_table: Dict[Tuple[Family, Size, Adder], float] = _factory_ase_increments()
        self.subscription_base_table: Dict[Family, float] = {
            Family(family): price for family, price in config.SUBSCRIPTION_BASE.items()
        }
        self.validate()
        logger.debug("Reference tables restored to factory defaults")

    def validate(self) -> None:
        """
        Assert every reachable (family, size, adder) cell is populated.

        Raises KeyError naming the first missing cell.
        """
        for family in Family:
            self._require(self.system_default_cost, family, "system default cost")
            self._require(self.subscription_base_table, family, "subscription base")
            for size in SYSTEM_SIZES:
                self._require(self.ase_base_table, (family, size), "ASE base")
                for adder in ASE_ADDERS:
                    self._require(self.ase_increment_table, (family, size, adder), "ASE increment")
            for adder in Adder:
                for size in adder_sizes(adder) or (None,):
                    self._require(
                        self.adder_cost_table, adder_cost_key(adder, family, size), "add-on cost"
                    )

    @staticmethod
    def _require(table: dict, key, name: str) -> None:
        if key not in table:
            raise KeyError(f"Missing {name} for {key!r}")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def default_cost(self, family: Family) -> float:
        return self._lookup(self.system_default_cost, Family(family), "system default cost")

    def adder_cost(self, adder: Adder, family: Family, size: Optional[Size]) -> float:
        key = adder_cost_key(adder, family, size)
        return self._lookup(self.adder_cost_table, key, "add-on cost")

    def ase_base(self, family: Family, size: Size) -> float:
        return self._lookup(self.ase_base_table, (Family(family), Size(size)), "ASE base")

    def ase_increment(self, family: Family, size: Size, adder: Adder) -> float:
        key = (Family(family), Size(size), Adder(adder))
        return self._lookup(self.ase_increment_table, key, "ASE increment")

    def subscription_base(self, family: Family) -> float:
        return self._lookup(self.subscription_base_table, Family(family), "subscription base")

    @staticmethod
    def _lookup(table: dict, key, name: str) -> float:
        try:
            return table[key]
        except KeyError:
            raise KeyError(f"Missing {name} for {key!r}") from None

    # ------------------------------------------------------------------
    # Point updates (no range validation)
    # ------------------------------------------------------------------

    def set_default_cost(self, family: Family, value) -> float:
        return self._set_cell(self.system_default_cost, Family(family), value, "system default cost")

    def set_adder_cost(self, adder: Adder, family: Optional[Family], size: Optional[Size], value) -> float:
        """
        Replace one add-on cost cell.

        ``family`` is ignored for family-independent tables (Foam, Solar, UPS)
        and ``size`` for flat ones (Solar, UPS).
        """
        key = adder_cost_key(adder, family, size)
        return self._set_cell(self.adder_cost_table, key, value, "add-on cost")

    def set_ase_base(self, family: Family, size: Size, value) -> float:
        return self._set_cell(self.ase_base_table, (Family(family), Size(size)), value, "ASE base")

    def set_ase_increment(self, family: Family, size: Size, adder: Adder, value) -> float:
        key = (Family(family), Size(size), Adder(adder))
        return self._set_cell(self.ase_increment_table, key, value, "ASE increment")

    def set_subscription_base(self, family: Family, value) -> float:
        return self._set_cell(self.subscription_base_table, Family(family), value, "subscription base")

    @staticmethod
    def _set_cell(table: dict, key, value, name: str) -> float:
        if key not in table:
            raise KeyError(f"Unknown {name} cell {key!r}")
        table[key] = to_number(value)
        logger.debug(f"{name} {key!r} set to {table[key]}")
        return table[key]
