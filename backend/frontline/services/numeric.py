"""Numeric helpers shared by the pricing engines: input coercion, clamps and rounding."""
import math
import logging
from typing import Any

logger = logging.getLogger("frontline-pricing.numeric")

_TRUE_WORDS = frozenset({"true", "1", "yes", "on", "y"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off", "n", ""})


def to_number(raw: Any) -> float:
    """
    Coerce a raw input value to a finite float.

    None, blank or unparseable strings, NaN, ±inf and integers too large for
    a float all coerce to 0.0.  Booleans are rejected as numbers as well.
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip().replace(",", "")
        if raw == "":
            return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Could not parse numeric input {type(raw).__name__}; using 0")
        return 0.0
    if not math.isfinite(value):
        logger.warning(f"Non-finite numeric input {raw!r}; using 0")
        return 0.0
    return value


def to_flag(raw: Any) -> bool:
    """
    Coerce a raw toggle value to a bool.

    Strings are read as words ("true"/"false", "on"/"off", "1"/"0", ...);
    unrecognised words are off.  Numbers are on when non-zero.
    """
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    if isinstance(raw, str):
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word not in _FALSE_WORDS:
            logger.warning(f"Unrecognised toggle input {raw!r}; using off")
        return False
    return to_number(raw) != 0.0


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """
    Round to the nearest whole currency unit, halves rounding up.

    A non-finite value (e.g. a huge cost over the 0.01 denominator floor)
    rounds to 0.
    """
    if not math.isfinite(value):
        logger.warning(f"Non-finite amount {value!r} while rounding; using 0")
        return 0
    return int(math.floor(value + 0.5))


def round_cents(value: float) -> float:
    """Round to 2 decimal places, halves rounding up; non-finite values give 0.0."""
    scaled = value * 100.0
    if not math.isfinite(scaled):
        logger.warning(f"Non-finite amount {value!r} while rounding to cents; using 0")
        return 0.0
    return math.floor(scaled + 0.5) / 100.0
