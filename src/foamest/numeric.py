from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

logger = logging.getLogger(__name__)

_BOOLEAN_TRUE = {"1", "true", "yes", "on"}


def round_half_up(value: float, places: int = 0) -> float:
    """Round ``value`` half away from zero, the way invoices and the quote front end do.

    The float is routed through ``repr`` so that values such as ``1.675`` round
    to ``1.68`` rather than falling victim to their binary representation.
    """

    if value is None or math.isnan(value) or math.isinf(value):
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    return round_half_up(value, 2)


def safe_divide(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator`` or 0.0 when the denominator is zero or not finite."""

    if not denominator or math.isnan(denominator) or math.isinf(denominator):
        return 0.0
    result = numerator / denominator
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def to_float(value: object | None) -> Optional[float]:
    """Parse a number from form or file input, ignoring "$", "," and "%"; ``None`` when unparseable."""

    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).replace("$", "").replace(",", "").replace("%", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def to_flag(value: object | None) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _BOOLEAN_TRUE


def coerce_non_negative(value: object | None) -> float:
    """Parse a numeric form entry, clamping NaN, blanks and negatives to 0."""

    number = to_float(value)
    if number is None or math.isnan(number) or number < 0:
        logger.debug("Clamping numeric input %r to 0", value)
        return 0.0
    if math.isinf(number):
        logger.debug("Clamping non-finite input %r to 0", value)
        return 0.0
    return number


def coerce_optional(value: object | None) -> Optional[float]:
    """Like :func:`coerce_non_negative` but blanks and ``None`` stay unset."""

    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return coerce_non_negative(value)


__all__ = [
    "round_half_up",
    "round2",
    "safe_divide",
    "to_float",
    "to_flag",
    "coerce_non_negative",
    "coerce_optional",
]
