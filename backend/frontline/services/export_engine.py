"""
Export / presentation adapter.

Read-only projections of a derived quote: the structured ``QuoteSnapshot``
for downstream quoting tools and the formatted rows of the live summary view.
Nothing here mutates the quote it is given.
"""

import math
from typing import TYPE_CHECKING, Dict, List, Tuple

from frontline import config
from frontline.models.pricing_schema import (
    AdderLine,
    QuoteSnapshot,
    SubscriptionLine,
    SystemLine,
)

if TYPE_CHECKING:
    from frontline.services.quote_aggregator import QuoteTotals
    from frontline.services.quote_session import QuoteResult


def build_snapshot(result: "QuoteResult") -> QuoteSnapshot:
    state = result.state
    triad = state.triad
    vertical_label = config.VERTICALS[state.vertical][0]
    return QuoteSnapshot(
        system=SystemLine(
            family=state.family,
            size=state.size,
            size_label=config.SIZE_LABELS[state.size.value],
            cost=triad.cost,
            margin=round(triad.margin, 3),
            price=triad.price,
            last_edited=triad.last_edited,
        ),
        adders={
            adder: (
                AdderLine(size=q.effective_size, cost=q.cost, price=q.price)
                if q.enabled else None
            )
            for adder, q in result.adders.items()
        },
        adders_subtotal=result.totals.adders_total,
        ase_annual=result.totals.ase_annual,
        subscription=SubscriptionLine(
            monthly=result.totals.subscription_monthly,
            vertical=vertical_label,
            annual_billing=state.annual_billing,
        ),
        one_time_total=result.totals.one_time_total,
    )


def snapshot_json(result: "QuoteResult", indent: int = 2) -> str:
    """Pretty-printed JSON export for copy/paste."""
    return build_snapshot(result).model_dump_json(indent=indent)


def format_usd(amount: float) -> str:
    """Whole-dollar USD, e.g. ``$12,345``; non-finite values render as an em dash."""
    if amount is None or not math.isfinite(amount):
        return "—"
    whole = math.floor(abs(amount) + 0.5)
    sign = "-" if amount < 0 and whole else ""
    return f"{sign}${whole:,}"


def summary_rows(totals: "QuoteTotals") -> List[Tuple[str, str]]:
    """Rows of the quote summary panel, in display order."""
    return [
        ("System Price", format_usd(totals.system_price)),
        ("Adders Total", format_usd(totals.adders_total)),
        ("One-Time Total", format_usd(totals.one_time_total)),
        ("ASE (Annual)", format_usd(totals.ase_annual)),
        ("Subscription (Monthly)", format_usd(totals.subscription_monthly)),
    ]


def input_bounds() -> Dict[str, Tuple[float, float]]:
    """
    Ranges a form layer should offer for the GM inputs.

    The slider is narrower than typed entry; the engine itself only applies
    the entry clamp.
    """
    return {
        "target_gm_slider": config.GM_SLIDER_RANGE,
        "target_gm_entry": (config.MARGIN_MIN, config.MARGIN_MAX),
        "adder_gm_slider": config.GM_SLIDER_RANGE,
    }


def size_options() -> List[Tuple[str, str]]:
    """(value, label) pairs for the system size selector."""
    return list(config.SIZE_LABELS.items())
