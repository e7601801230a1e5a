"""
QuoteSession — owns the inputs of one editing session and re-derives the
whole quote after every input event.

Flow per event:
    inputs / reference tables updated
      -> margin reconciler   (system cost / GM / price)
      -> add-on resolver     (effective size, cost, price per add-on)
      -> aggregator          (one-time, ASE, subscription totals)

The new state is fully derived before it replaces the old one, so a failing
event leaves the previous quote in place.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from frontline import config
from frontline.models.pricing_schema import Adder, EditedField, Family, QuoteSnapshot, Size, SYSTEM_SIZES
from frontline.services import export_engine
from frontline.services.adder_engine import (
    AdderQuote,
    AdderSelection,
    resolve_adders,
    validate_size_override,
)
from frontline.services.margin_engine import (
    SystemTriad,
    apply_edit,
    apply_preset,
    initial_triad,
    reconcile,
)
from frontline.services.numeric import to_flag, to_number
from frontline.services.quote_aggregator import QuoteTotals, aggregate
from frontline.services.reference_store import ReferenceDataStore

logger = logging.getLogger("frontline-pricing.session")


def default_selections() -> Dict[Adder, AdderSelection]:
    return {
        Adder(key): AdderSelection(enabled=enabled)
        for key, enabled in config.DEFAULT_ADDERS_ENABLED.items()
    }


@dataclass(frozen=True)
class QuoteState:
    family: Family
    size: Size
    triad: SystemTriad
    adder_margin: float
    selections: Mapping[Adder, AdderSelection] = field(default_factory=default_selections)
    vertical: str = config.DEFAULT_VERTICAL
    high_usage: bool = False
    annual_billing: bool = False

    def __post_init__(self):
        # read-only; selections change only through session events
        object.__setattr__(self, "selections", MappingProxyType(dict(self.selections)))


@dataclass(frozen=True)
class QuoteResult:
    state: QuoteState
    adders: Dict[Adder, AdderQuote]
    totals: QuoteTotals


def compute_quote(state: QuoteState, store: ReferenceDataStore) -> QuoteResult:
    """Derive the full quote from ``state``; pure with respect to both arguments."""
    triad = reconcile(state.triad)
    state = replace(state, triad=triad)
    adders = resolve_adders(state.selections, state.family, state.size, store, state.adder_margin)
    totals = aggregate(
        system_price=triad.price,
        family=state.family,
        size=state.size,
        quotes=adders,
        vertical_key=state.vertical,
        high_usage=state.high_usage,
        annual_billing=state.annual_billing,
        store=store,
    )
    return QuoteResult(state=state, adders=adders, totals=totals)


def factory_state(store: ReferenceDataStore) -> QuoteState:
    family = Family(config.DEFAULT_FAMILY)
    return QuoteState(
        family=family,
        size=Size(config.DEFAULT_SIZE),
        triad=initial_triad(store.default_cost(family), config.DEFAULT_SYSTEM_GM),
        adder_margin=config.DEFAULT_ADDER_GM,
    )


class QuoteSession:
    """
    One pricing calculator session.

    Every public mutator is a single input event and returns the freshly
    derived ``QuoteResult``.
    """

    def __init__(self, store: Optional[ReferenceDataStore] = None) -> None:
        self.store = store or ReferenceDataStore()
        self._result = compute_quote(factory_state(self.store), self.store)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> QuoteState:
        return self._result.state

    def quote(self) -> QuoteResult:
        return self._result

    def snapshot(self) -> QuoteSnapshot:
        return export_engine.build_snapshot(self._result)

    def snapshot_json(self, indent: int = 2) -> str:
        return export_engine.snapshot_json(self._result, indent=indent)

    def summary_rows(self):
        return export_engine.summary_rows(self._result.totals)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _commit(self, state: QuoteState, event: str) -> QuoteResult:
        result = compute_quote(state, self.store)
        self._result = result
        s = result.state
        logger.debug(
            f"{event}: price={s.triad.price} one_time={result.totals.one_time_total}",
            extra={
                "event": event,
                "family": s.family.value,
                "size": s.size.value,
                "last_edited": s.triad.last_edited.value,
            },
        )
        return result

    def _with_selection(self, adder: Adder, **changes) -> Dict[Adder, AdderSelection]:
        selections = dict(self.state.selections)
        selections[adder] = replace(selections[adder], **changes)
        return selections

    # ------------------------------------------------------------------
    # System identity
    # ------------------------------------------------------------------

    def set_family(self, family: Family) -> QuoteResult:
        """
        Switch product family.

        Partial reset: add-on toggles return to defaults, overrides clear,
        cost resets to the family default and price is re-derived from the
        current GM.
        """
        family = Family(family)
        cost = self.store.default_cost(family)
        triad = replace(self.state.triad, cost=cost, last_edited=EditedField.COST)
        state = replace(
            self.state,
            family=family,
            triad=triad,
            selections=default_selections(),
        )
        logger.info(
            f"Family switched to {family.value}; cost reset to {cost}",
            extra={"event": "set_family", "family": family.value},
        )
        return self._commit(state, "set_family")

    def set_size(self, size: Size) -> QuoteResult:
        size = Size(size)
        if size not in SYSTEM_SIZES:
            raise ValueError(f"Size '{size.value}' is not a system size")
        return self._commit(replace(self.state, size=size), "set_size")

    # ------------------------------------------------------------------
    # Cost / margin / price
    # ------------------------------------------------------------------

    def edit_cost(self, value) -> QuoteResult:
        triad = apply_edit(self.state.triad, EditedField.COST, value)
        return self._commit(replace(self.state, triad=triad), "edit_cost")

    def edit_margin(self, value) -> QuoteResult:
        triad = apply_edit(self.state.triad, EditedField.MARGIN, value)
        return self._commit(replace(self.state, triad=triad), "edit_margin")

    def edit_price(self, value) -> QuoteResult:
        triad = apply_edit(self.state.triad, EditedField.PRICE, value)
        return self._commit(replace(self.state, triad=triad), "edit_price")

    def set_adder_margin(self, value) -> QuoteResult:
        return self._commit(replace(self.state, adder_margin=to_number(value)), "set_adder_margin")

    def apply_preset(self, preset_key: str) -> QuoteResult:
        """Set system GM (as a margin edit) and adder GM from a named preset."""
        triad, adder_gm = apply_preset(self.state.triad, preset_key)
        state = replace(self.state, triad=triad, adder_margin=adder_gm)
        return self._commit(state, "apply_preset")

    # ------------------------------------------------------------------
    # Add-ons
    # ------------------------------------------------------------------

    def set_adder_enabled(self, adder: Adder, enabled: bool) -> QuoteResult:
        adder = Adder(adder)
        selections = self._with_selection(adder, enabled=to_flag(enabled))
        return self._commit(replace(self.state, selections=selections), f"toggle_{adder.value}")

    def set_adder_size(self, adder: Adder, size: Optional[Size]) -> QuoteResult:
        """Override an add-on's size; ``None`` follows the system size again."""
        adder = Adder(adder)
        size = validate_size_override(adder, size)
        selections = self._with_selection(adder, size_override=size)
        return self._commit(replace(self.state, selections=selections), f"size_{adder.value}")

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def set_vertical(self, vertical_key: str) -> QuoteResult:
        if vertical_key not in config.VERTICALS:
            raise ValueError(f"Unknown vertical '{vertical_key}'")
        return self._commit(replace(self.state, vertical=vertical_key), "set_vertical")

    def set_high_usage(self, high_usage: bool) -> QuoteResult:
        return self._commit(replace(self.state, high_usage=to_flag(high_usage)), "set_high_usage")

    def set_annual_billing(self, annual_billing: bool) -> QuoteResult:
        return self._commit(
            replace(self.state, annual_billing=to_flag(annual_billing)), "set_annual_billing"
        )

    # ------------------------------------------------------------------
    # Reference table edits
    # ------------------------------------------------------------------

    def set_adder_cost(self, adder: Adder, family: Optional[Family], size: Optional[Size], value) -> QuoteResult:
        self.store.set_adder_cost(adder, family, size, value)
        return self._commit(self.state, "set_adder_cost")

    def set_ase_base(self, family: Family, size: Size, value) -> QuoteResult:
        self.store.set_ase_base(family, size, value)
        return self._commit(self.state, "set_ase_base")

    def set_ase_increment(self, family: Family, size: Size, adder: Adder, value) -> QuoteResult:
        self.store.set_ase_increment(family, size, adder, value)
        return self._commit(self.state, "set_ase_increment")

    def set_subscription_base(self, family: Family, value) -> QuoteResult:
        self.store.set_subscription_base(family, value)
        return self._commit(self.state, "set_subscription_base")

    def set_default_cost(self, family: Family, value) -> QuoteResult:
        """Change a family's default system cost; takes effect on the next family switch or reset."""
        self.store.set_default_cost(family, value)
        return self._commit(self.state, "set_default_cost")

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset(self) -> QuoteResult:
        """Restore tables and every input to factory defaults."""
        self.store.reset()
        logger.info("Session reset to factory defaults", extra={"event": "reset"})
        return self._commit(factory_state(self.store), "reset")
