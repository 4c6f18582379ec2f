"""
Estimate versus actual job comparison.

Actual material cost is priced at fixed reference costs per set
(``REFERENCE_COST_PER_SET``) rather than each application's configured
supplier price, and the customer charge is taken from the estimate because the
price was fixed when the quote went out.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .aggregate import estimate_job
from .commission import compute_commission
from .foam import GALLONS_PER_SET, LANDED_COST_FACTOR
from .models import (
    CLOSED_CELL,
    OPEN_CELL,
    ActualResult,
    Actuals,
    Area,
    BusinessSettings,
    Comparison,
    ComparisonLine,
    EstimateResult,
    FoamTotals,
    GlobalInputs,
)
from .overhead import allocate_overhead

# TODO: price actual gallons from each application's material_price once
# per-area actual gallons are recorded.
REFERENCE_COST_PER_SET = {
    OPEN_CELL: 1870.0 * LANDED_COST_FACTOR,
    CLOSED_CELL: 2470.0 * LANDED_COST_FACTOR,
}


def _effective(actual: Optional[float], estimate: float) -> float:
    return estimate if actual is None else actual


def compute_actuals(
    estimate: EstimateResult,
    inputs: GlobalInputs,
    actuals: Actuals,
    settings: BusinessSettings | None = None,
) -> ActualResult:
    settings = settings or BusinessSettings()
    labor_hours = _effective(actuals.actual_labor_hours, inputs.labor_hours)
    gallons = FoamTotals(
        open=_effective(actuals.actual_open_gallons, estimate.total_gallons.open),
        closed=_effective(actuals.actual_closed_gallons, estimate.total_gallons.closed),
    )
    material_cost = (
        gallons.open / GALLONS_PER_SET * REFERENCE_COST_PER_SET[OPEN_CELL]
        + gallons.closed / GALLONS_PER_SET * REFERENCE_COST_PER_SET[CLOSED_CELL]
    )
    labor_cost = labor_hours * inputs.manual_labor_rate
    total_base_cost = (
        material_cost
        + labor_cost
        + estimate.fuel_cost
        + inputs.waste_disposal
        + inputs.equipment_rental
    )
    customer_cost = estimate.customer_cost
    commission = compute_commission(customer_cost, total_base_cost)
    overhead = allocate_overhead(settings, labor_hours, commission.final_profit)
    return ActualResult(
        labor_hours=labor_hours,
        total_gallons=gallons,
        material_cost=material_cost,
        labor_cost=labor_cost,
        fuel_cost=estimate.fuel_cost,
        waste_disposal=inputs.waste_disposal,
        equipment_rental=inputs.equipment_rental,
        total_base_cost=total_base_cost,
        customer_cost=customer_cost,
        commission=commission,
        overhead=overhead,
    )


def compare(
    estimate: EstimateResult,
    actual: ActualResult,
    inputs: GlobalInputs,
) -> Comparison:
    lines = (
        ComparisonLine("labor_hours", inputs.labor_hours, actual.labor_hours),
        ComparisonLine("open_gallons", estimate.total_gallons.open, actual.total_gallons.open),
        ComparisonLine("closed_gallons", estimate.total_gallons.closed, actual.total_gallons.closed),
        ComparisonLine("material_cost", estimate.base_material_cost, actual.material_cost),
        ComparisonLine("labor_cost", estimate.base_labor_cost, actual.labor_cost),
        ComparisonLine("total_base_cost", estimate.total_base_cost, actual.total_base_cost),
        ComparisonLine("customer_cost", estimate.customer_cost, actual.customer_cost),
        ComparisonLine("commission", estimate.commission.commission, actual.commission.commission),
        ComparisonLine("final_profit", estimate.final_profit, actual.final_profit),
        ComparisonLine("final_margin", estimate.final_margin, actual.final_margin),
        ComparisonLine("job_overhead", estimate.job_overhead, actual.job_overhead),
        ComparisonLine("true_net_profit", estimate.true_net_profit, actual.true_net_profit),
    )
    return Comparison(estimate=estimate, actual=actual, lines=lines)


def compare_job(
    areas: Sequence[Area],
    inputs: GlobalInputs,
    actuals: Actuals,
    settings: BusinessSettings | None = None,
) -> Comparison:
    """Estimate the job, recompute it from ``actuals`` and pair the two."""

    estimate = estimate_job(areas, inputs, settings)
    actual = compute_actuals(estimate, inputs, actuals, settings)
    return compare(estimate, actual, inputs)


__all__ = ["REFERENCE_COST_PER_SET", "compute_actuals", "compare", "compare_job"]
