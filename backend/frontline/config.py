"""
Pricing configuration: single source of truth for factory defaults,
clamps, presets, verticals and environment overrides.

Import from here in all services rather than hardcoding values.
"""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("frontline-pricing.config")


# ── Margin clamps & numeric guards ────────────────────────────────────────────

# Cost / margin edit paths clamp the target GM into this band
MARGIN_MIN: float = 0.05
MARGIN_MAX: float = 0.90

# Price edit path derives GM and clamps it into this band
DERIVED_MARGIN_MIN: float = 0.0
DERIVED_MARGIN_MAX: float = 0.95

# Denominator floors
MIN_PRICE_DENOMINATOR: float = 0.01   # max(1 - margin, 0.01)
MIN_PRICE_FOR_MARGIN: float = 1.0     # max(price, 1)

# Target GM slider range shown by presentation layers; not enforced by the engine
GM_SLIDER_RANGE: tuple[float, float] = (0.20, 0.70)


# ── Session factory state ─────────────────────────────────────────────────────

DEFAULT_FAMILY: str = "MP3"
DEFAULT_SIZE: str = "M"
DEFAULT_VERTICAL: str = "res"
DEFAULT_SYSTEM_GM: float = 0.50
DEFAULT_ADDER_GM: float = 0.50
DEFAULT_LAST_EDITED: str = "price"

# Foam ships enabled, everything else off
DEFAULT_ADDERS_ENABLED: dict[str, bool] = {
    "foam":    True,
    "booster": False,
    "pool":    False,
    "solar":   False,
    "ups":     False,
}

SIZE_LABELS: dict[str, str] = {
    "S": "Small (0–3 zones)",
    "M": "Medium (4–6 zones)",
    "L": "Large (7–9 zones)",
}


# ── Subscription ──────────────────────────────────────────────────────────────

SUBSCRIPTION_BASE: dict[str, float] = {"MP3": 89.0, "LV2": 129.0}
HIGH_USAGE_SURCHARGE: float = 20.0
ANNUAL_BILLING_FACTOR: float = 0.90

# key -> (label, multiplier)
VERTICALS: dict[str, tuple[str, float]] = {
    "res":  ("Luxury Residential",     1.00),
    "prod": ("Production / Community", 0.90),
    "ci":   ("C&I / Commercial",       0.95),
}

# key -> (label, system GM, adder GM)
GM_PRESETS: dict[str, tuple[str, float, float]] = {
    "res":  ("Residential 50% GM",  0.500, 0.500),
    "ci":   ("C&I 42.5% GM",        0.425, 0.425),
    "prod": ("Production 37.5% GM", 0.375, 0.375),
}


# ── Annual Service & Extension (ASE) ─────────────────────────────────────────

ASE_BASE: dict[str, dict[str, float]] = {
    "MP3": {"S": 795.0, "M": 895.0, "L": 995.0},
    "LV2": {"S": 995.0, "M": 1095.0, "L": 1195.0},
}

# UPS carries no ASE increment
ASE_INCREMENTS: dict[str, dict[str, dict[str, float]]] = {
    "MP3": {
        "S": {"foam":  99.0, "booster": 149.0, "pool": 129.0, "solar":  79.0},
        "M": {"foam": 119.0, "booster": 169.0, "pool": 149.0, "solar":  89.0},
        "L": {"foam": 139.0, "booster": 189.0, "pool": 169.0, "solar":  99.0},
    },
    "LV2": {
        "S": {"foam": 149.0, "booster": 189.0, "pool": 159.0, "solar":  89.0},
        "M": {"foam": 169.0, "booster": 199.0, "pool": 179.0, "solar":  99.0},
        "L": {"foam": 189.0, "booster": 219.0, "pool": 199.0, "solar": 109.0},
    },
}


# ── Add-on cost tables ────────────────────────────────────────────────────────

FOAM_COST: dict[str, float] = {"S": 700.0, "M": 1000.0, "L": 1400.0, "XL": 1800.0}

BOOSTER_COST: dict[str, dict[str, float]] = {
    "MP3": {"S": 1100.0, "M": 1650.0, "L": 2300.0},
    "LV2": {"S": 1400.0, "M": 2100.0, "L": 2900.0},
}

POOL_COST: dict[str, dict[str, float]] = {
    "MP3": {"S": 450.0, "M": 750.0, "L": 1050.0},
    "LV2": {"S": 600.0, "M": 900.0, "L": 1200.0},
}

SOLAR_FLAT_COST: float = 700.0
UPS_FLAT_COST: float = 250.0


# ── System default cost (per family) ──────────────────────────────────────────

# LV2 figure has not been confirmed against the pricing guide
_FACTORY_DEFAULT_COST: dict[str, float] = {"MP3": 50_000.0, "LV2": 60_000.0}


def _env_float(var: str, fallback: float) -> float:
    raw = os.getenv(var)
    if raw is None or raw.strip() == "":
        return fallback
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {var}={raw!r}; using {fallback}")
        return fallback


def default_system_costs() -> dict[str, float]:
    """Factory default system cost per family, honouring env overrides."""
    return {
        "MP3": _env_float("FRONTLINE_MP3_DEFAULT_COST", _FACTORY_DEFAULT_COST["MP3"]),
        "LV2": _env_float("FRONTLINE_LV2_DEFAULT_COST", _FACTORY_DEFAULT_COST["LV2"]),
    }


# ── Logging ───────────────────────────────────────────────────────────────────

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON: bool = os.getenv("LOG_FORMAT", "json").lower() != "text"
