from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field


class Family(str, Enum):
    MP3 = "MP3"
    LV2 = "LV2"


class Size(str, Enum):
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"   # Foam only


SYSTEM_SIZES = (Size.S, Size.M, Size.L)


class Adder(str, Enum):
    FOAM = "foam"
    BOOSTER = "booster"
    POOL = "pool"       # Pool / Draft
    SOLAR = "solar"
    UPS = "ups"


class EditedField(str, Enum):
    COST = "cost"
    MARGIN = "margin"
    PRICE = "price"


class AdderLine(BaseModel):
    """Exported add-on line; absent (None) when the add-on is disabled."""
    size: Optional[Size] = Field(None, description="Effective size; None for flat add-ons")
    cost: float = Field(..., description="Table cost at the effective size")
    price: int = Field(..., description="Cost converted at the shared adder GM")


class SystemLine(BaseModel):
    family: Family
    size: Size
    size_label: str = Field(..., description="e.g. 'Medium (4–6 zones)'")
    cost: float
    margin: float = Field(..., description="Gross margin fraction, rounded to 3 decimals")
    price: int
    last_edited: EditedField


class SubscriptionLine(BaseModel):
    monthly: float = Field(..., description="Monthly fee, rounded to cents")
    vertical: str = Field(..., description="Vertical label, e.g. 'Luxury Residential'")
    annual_billing: bool


class QuoteSnapshot(BaseModel):
    """
    Machine-readable quote export.

    A read projection of a quote session intended for copy/paste into
    downstream quoting tools.
    """
    system: SystemLine
    adders: Dict[Adder, Optional[AdderLine]]
    adders_subtotal: int
    ase_annual: float
    subscription: SubscriptionLine
    one_time_total: int
