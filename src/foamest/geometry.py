"""Square footage resolution for insulated areas."""

from __future__ import annotations

import math
import re
from typing import Tuple

from .errors import InvalidPitchFormat
from .models import GABLE, ROOF_DECK, Area

PITCH_PATTERN = re.compile(r"^\s*(?P<rise>\d+(?:\.\d+)?|\.\d+)\s*/\s*(?P<run>\d+(?:\.\d+)?|\.\d+)\s*$")


def parse_pitch(pitch: str) -> Tuple[float, float]:
    """Return ``(rise, run)`` for a pitch such as ``"4/12"``.

    Raises :class:`InvalidPitchFormat` when the text is not two non-negative
    numbers separated by ``/`` or when the run is zero.
    """

    if pitch is None:
        raise InvalidPitchFormat(pitch)
    match = PITCH_PATTERN.match(str(pitch))
    if not match:
        raise InvalidPitchFormat(pitch)
    rise = float(match.group("rise"))
    run = float(match.group("run"))
    if run == 0:
        raise InvalidPitchFormat(pitch)
    return rise, run


def pitch_factor(pitch: str) -> float:
    """Multiplier from horizontal footprint to sloped surface, ``sqrt(rise² + run²) / run``."""

    rise, run = parse_pitch(pitch)
    return math.sqrt(rise**2 + run**2) / run


def is_valid_pitch(pitch: str) -> bool:
    try:
        parse_pitch(pitch)
    except InvalidPitchFormat:
        return False
    return True


def effective_sqft(area: Area) -> float:
    """Square footage to spray for ``area``.

    A manual ``area_sqft`` wins over dimensions. Roof decks are scaled by the
    pitch factor (for manual square footage only when the area opts in), and
    gables are triangles so only half of ``length * width`` is used.
    """

    if area.area_sqft > 0:
        sqft = area.area_sqft
        if area.area_type == ROOF_DECK and area.apply_pitch_to_manual_area:
            sqft *= pitch_factor(area.roof_pitch)
    elif area.area_type == GABLE:
        sqft = 0.5 * area.length * area.width
    else:
        sqft = area.length * area.width
        if area.area_type == ROOF_DECK:
            sqft *= pitch_factor(area.roof_pitch)
    return max(0.0, sqft)


__all__ = ["parse_pitch", "pitch_factor", "is_valid_pitch", "effective_sqft"]
