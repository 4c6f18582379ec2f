"""Per-application foam quantities and pricing."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict

from .geometry import effective_sqft
from .models import CLOSED_CELL, OPEN_CELL, ApplicationBreakdown, Area, FoamApplication, normalize_foam_type
from .numeric import round2, safe_divide

GALLONS_PER_SET = 100.0
# Freight, tax and handling on top of the supplier's price per set.
LANDED_COST_FACTOR = 1.20
R_VALUE_PER_INCH = {OPEN_CELL: 3.8, CLOSED_CELL: 7.2}

FOAM_DEFAULTS: Dict[str, Dict[str, float]] = {
    OPEN_CELL: {
        "foam_thickness": 6.0,
        "material_price": 1870.0,
        "material_markup": 75.0,
        "board_feet_per_set": 14000.0,
    },
    CLOSED_CELL: {
        "foam_thickness": 2.0,
        "material_price": 2470.0,
        # lands the default 2in closed cell job on $2.38/sqft
        "material_markup": 60.59,
        "board_feet_per_set": 4000.0,
    },
}


def default_application(app_id: int, foam_type: str = OPEN_CELL) -> FoamApplication:
    """Build a foam application carrying ``foam_type``'s factory defaults."""

    canonical = normalize_foam_type(foam_type) or OPEN_CELL
    return FoamApplication(id=app_id, foam_type=canonical, **FOAM_DEFAULTS[canonical])


def reset_to_defaults(app: FoamApplication, foam_type: str) -> FoamApplication:
    """Re-select ``foam_type`` on ``app``; every other field goes back to that type's defaults."""

    canonical = normalize_foam_type(foam_type) or OPEN_CELL
    return replace(app, foam_type=canonical, **FOAM_DEFAULTS[canonical])


def material_cost_per_set(app: FoamApplication) -> float:
    return app.material_price * LANDED_COST_FACTOR


def r_value(app: FoamApplication) -> float:
    per_inch = R_VALUE_PER_INCH.get(app.foam_type, R_VALUE_PER_INCH[OPEN_CELL])
    return app.foam_thickness * per_inch


def compute_application(area: Area, app: FoamApplication, sqft: float | None = None) -> ApplicationBreakdown:
    """
    Price one foam application over ``area``.

    ``total_cost`` is built from the rounded ``price_per_sqft`` rather than the
    raw material total so that quantity x unit price always equals the line
    total on a quote; the few cents of drift are accepted.
    """

    if sqft is None:
        sqft = effective_sqft(area)
    board_feet = sqft * app.foam_thickness
    sets = safe_divide(board_feet, app.board_feet_per_set)
    gallons = sets * GALLONS_PER_SET
    cost_per_set = material_cost_per_set(app)
    base_material_cost = sets * cost_per_set
    markup_amount = base_material_cost * (app.material_markup / 100.0)
    raw_total = base_material_cost + markup_amount
    price_per_sqft = round2(raw_total / sqft) if sqft > 0 else 0.0
    total_cost = price_per_sqft * sqft
    return ApplicationBreakdown(
        area_id=area.id,
        application_id=app.id,
        foam_type=app.foam_type,
        foam_thickness=app.foam_thickness,
        sqft=sqft,
        board_feet=board_feet,
        sets=sets,
        gallons=gallons,
        material_cost_per_set=cost_per_set,
        base_material_cost=base_material_cost,
        markup_amount=markup_amount,
        raw_total=raw_total,
        total_cost=total_cost,
        r_value=r_value(app),
        price_per_sqft=price_per_sqft,
    )


__all__ = [
    "GALLONS_PER_SET",
    "LANDED_COST_FACTOR",
    "R_VALUE_PER_INCH",
    "FOAM_DEFAULTS",
    "default_application",
    "reset_to_defaults",
    "material_cost_per_set",
    "r_value",
    "compute_application",
]
