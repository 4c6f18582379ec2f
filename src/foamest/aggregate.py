"""Roll per-application pricing up into job totals."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .commission import compute_commission
from .errors import InvalidPitchFormat
from .foam import compute_application
from .geometry import effective_sqft
from .models import (
    Area,
    AreaBreakdown,
    BusinessSettings,
    EstimateResult,
    FoamTotals,
    GlobalInputs,
)
from .overhead import allocate_overhead

logger = logging.getLogger(__name__)


def area_breakdown(area: Area) -> AreaBreakdown:
    """
    Price every foam application over ``area``.

    An area whose roof pitch cannot be parsed is returned with ``error`` set
    and no applications so that it never reaches the job totals.
    """

    try:
        sqft = effective_sqft(area)
    except InvalidPitchFormat as exc:
        logger.warning("Area %s (%s) excluded from totals: %s", area.id, area.name, exc)
        return AreaBreakdown(
            area_id=area.id,
            name=area.name,
            area_type=area.area_type,
            sqft=0.0,
            applications=(),
            error=str(exc),
        )
    applications = tuple(compute_application(area, app, sqft=sqft) for app in area.foam_applications)
    return AreaBreakdown(
        area_id=area.id,
        name=area.name,
        area_type=area.area_type,
        sqft=sqft,
        applications=applications,
    )


def estimate_job(
    areas: Sequence[Area],
    inputs: GlobalInputs,
    settings: BusinessSettings | None = None,
) -> EstimateResult:
    """Aggregate all areas with labor, travel, waste and equipment into the quoted job."""

    settings = settings or BusinessSettings()
    breakdowns: List[AreaBreakdown] = []
    gallons = FoamTotals()
    sets = FoamTotals()
    base_material_cost = 0.0
    material_markup_amount = 0.0

    for area in areas:
        breakdown = area_breakdown(area)
        breakdowns.append(breakdown)
        for app in breakdown.applications:
            gallons = gallons.add(app.foam_type, app.gallons)
            sets = sets.add(app.foam_type, app.sets)
            base_material_cost += app.base_material_cost
            material_markup_amount += app.markup_amount
        logger.debug(
            "area %s :: sqft=%.2f | applications=%d | total=$%.2f",
            area.name or area.id,
            breakdown.sqft,
            len(breakdown.applications),
            breakdown.total_cost,
        )

    fuel_cost = inputs.travel_distance * inputs.travel_rate
    base_labor_cost = inputs.labor_hours * inputs.manual_labor_rate
    total_base_cost = (
        base_material_cost
        + base_labor_cost
        + fuel_cost
        + inputs.waste_disposal
        + inputs.equipment_rental
    )
    labor_markup_amount = base_labor_cost * (inputs.labor_markup / 100.0)
    customer_cost = total_base_cost + material_markup_amount + labor_markup_amount

    commission = compute_commission(customer_cost, total_base_cost)
    overhead = allocate_overhead(settings, inputs.labor_hours, commission.final_profit)
    return EstimateResult(
        total_gallons=gallons,
        total_sets=sets,
        base_material_cost=base_material_cost,
        material_markup_amount=material_markup_amount,
        fuel_cost=fuel_cost,
        base_labor_cost=base_labor_cost,
        total_base_cost=total_base_cost,
        labor_markup_amount=labor_markup_amount,
        customer_cost=customer_cost,
        commission=commission,
        overhead=overhead,
        areas=tuple(breakdowns),
    )


__all__ = ["area_breakdown", "estimate_job"]
