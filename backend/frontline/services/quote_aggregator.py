"""
Quote aggregator — one-time, annual service and subscription totals.

Pure summation over already-resolved inputs; no state is read or written
beyond the arguments.
"""

from dataclasses import dataclass
from typing import Mapping

from frontline import config
from frontline.models.pricing_schema import Adder, Family, Size
from frontline.services.adder_engine import AdderQuote
from frontline.services.numeric import round_cents
from frontline.services.reference_store import ASE_ADDERS, ReferenceDataStore


@dataclass(frozen=True)
class QuoteTotals:
    system_price: int
    adders_total: int
    one_time_total: int
    ase_annual: float
    subscription_monthly: float


def adders_total(quotes: Mapping[Adder, AdderQuote]) -> int:
    return sum(q.price for q in quotes.values() if q.enabled)


def ase_annual(
    family: Family,
    size: Size,
    quotes: Mapping[Adder, AdderQuote],
    store: ReferenceDataStore,
) -> float:
    """
    ASE base for the system plus increments for enabled add-ons.

    Increments are read at the system size, not at an add-on's override.
    UPS is not an ASE add-on and never contributes.
    """
    total = store.ase_base(family, size)
    for adder in ASE_ADDERS:
        quote = quotes.get(adder)
        if quote is not None and quote.enabled:
            total += store.ase_increment(family, size, adder)
    return total


def vertical_multiplier(vertical_key: str) -> float:
    try:
        return config.VERTICALS[vertical_key][1]
    except KeyError:
        raise ValueError(f"Unknown vertical '{vertical_key}'") from None


def subscription_monthly(
    family: Family,
    vertical_key: str,
    high_usage: bool,
    annual_billing: bool,
    store: ReferenceDataStore,
) -> float:
    """
    Monthly subscription fee.

    Formula:
        round2((base * vertical + (20 if high usage)) * (0.9 if annual billing))

    Rounding happens once, after all multiplications and additions.
    """
    monthly = store.subscription_base(family) * vertical_multiplier(vertical_key)
    if high_usage:
        monthly += config.HIGH_USAGE_SURCHARGE
    if annual_billing:
        monthly *= config.ANNUAL_BILLING_FACTOR
    return round_cents(monthly)


def aggregate(
    system_price: int,
    family: Family,
    size: Size,
    quotes: Mapping[Adder, AdderQuote],
    vertical_key: str,
    high_usage: bool,
    annual_billing: bool,
    store: ReferenceDataStore,
) -> QuoteTotals:
    adders = adders_total(quotes)
    return QuoteTotals(
        system_price=system_price,
        adders_total=adders,
        one_time_total=system_price + adders,
        ase_annual=ase_annual(family, size, quotes, store),
        subscription_monthly=subscription_monthly(
            family, vertical_key, high_usage, annual_billing, store
        ),
    )
