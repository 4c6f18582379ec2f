"""
Quote line items in the shape the CRM's quote endpoint consumes.

Only the payloads are built here; sending them is left to the integration that
owns the CRM credentials.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .aggregate import estimate_job
from .models import (
    CLOSED_CELL,
    EXTERIOR_WALLS,
    GABLE,
    GENERAL,
    OPEN_CELL,
    ROOF_DECK,
    ApplicationBreakdown,
    AreaBreakdown,
    BusinessSettings,
    EstimateResult,
)
from .numeric import round2, round_half_up
from .state import EstimateState

LABOR_LINE_NAME = "Labor, Travel & Job Costs"

DESCRIPTION_TEMPLATES: Dict[tuple[str, str], str] = {
    (GENERAL, OPEN_CELL): (
        "Install {thickness} inches of open cell spray foam insulation for an R-value of {r_value}."
    ),
    (GENERAL, CLOSED_CELL): (
        "Install {thickness} inches of closed cell spray foam insulation for an R-value of {r_value}. "
        "Adds an air and vapor barrier."
    ),
    (EXTERIOR_WALLS, OPEN_CELL): (
        "Spray {thickness} inches of open cell foam into exterior wall cavities (R-{r_value}), "
        "sealing air leaks and dampening sound."
    ),
    (EXTERIOR_WALLS, CLOSED_CELL): (
        "Spray {thickness} inches of closed cell foam into exterior wall cavities (R-{r_value}), "
        "adding racking strength and a vapor barrier."
    ),
    (ROOF_DECK, OPEN_CELL): (
        "Apply {thickness} inches of open cell foam to the underside of the roof deck (R-{r_value}), "
        "creating a conditioned attic."
    ),
    (ROOF_DECK, CLOSED_CELL): (
        "Apply {thickness} inches of closed cell foam to the underside of the roof deck (R-{r_value}) "
        "for a sealed, moisture resistant attic."
    ),
    (GABLE, OPEN_CELL): (
        "Insulate gable walls with {thickness} inches of open cell spray foam (R-{r_value})."
    ),
    (GABLE, CLOSED_CELL): (
        "Insulate gable walls with {thickness} inches of closed cell spray foam (R-{r_value})."
    ),
}


def _format_thickness(thickness: float) -> str:
    return f"{thickness:g}"


def line_item_name(area_name: str, app: ApplicationBreakdown) -> str:
    return f"{area_name} ({app.foam_type} Cell {_format_thickness(app.foam_thickness)}in)"


def line_item_description(area_type: str, app: ApplicationBreakdown) -> str:
    template = DESCRIPTION_TEMPLATES.get((area_type, app.foam_type)) or DESCRIPTION_TEMPLATES[
        (GENERAL, app.foam_type if app.foam_type in (OPEN_CELL, CLOSED_CELL) else OPEN_CELL)
    ]
    return template.format(
        thickness=_format_thickness(app.foam_thickness),
        r_value=f"{round_half_up(app.r_value, 1):.1f}",
    )


def application_line_item(area: AreaBreakdown, app: ApplicationBreakdown) -> Dict[str, Any]:
    return {
        "name": line_item_name(area.name, app),
        "description": line_item_description(area.area_type, app),
        "quantity": int(round_half_up(app.sqft)),
        "unitPrice": app.price_per_sqft,
    }


def labor_total(estimate: EstimateResult, waste_disposal: float, equipment_rental: float) -> float:
    return (
        estimate.base_labor_cost
        + estimate.labor_markup_amount
        + estimate.fuel_cost
        + waste_disposal
        + equipment_rental
    )


def build_line_items(state: EstimateState, settings: Optional[BusinessSettings] = None) -> List[Dict[str, Any]]:
    """One line per foam application plus a single labor/travel/job cost line when non-zero."""

    estimate = estimate_job(state.areas, state.global_inputs, settings)
    items = [application_line_item(area, app) for area in estimate.areas for app in area.applications]
    total = labor_total(estimate, state.global_inputs.waste_disposal, state.global_inputs.equipment_rental)
    if total > 0:
        items.append(
            {
                "name": LABOR_LINE_NAME,
                "description": (
                    f"Labor ({state.global_inputs.labor_hours:g} hours), travel, waste disposal "
                    "and equipment for the job."
                ),
                "quantity": 1,
                "unitPrice": round2(total),
            }
        )
    return items


def build_quote_payload(state: EstimateState, settings: Optional[BusinessSettings] = None) -> Dict[str, Any]:
    """Quote request body: customer/job details plus line items."""

    meta = state.metadata
    items = build_line_items(state, settings)
    return {
        "client": {
            "name": meta.customer_name,
            "email": meta.customer_email,
            "phone": meta.customer_phone,
            "address": meta.job_address,
        },
        "title": meta.job_name or "Spray Foam Insulation",
        "date": meta.estimate_date,
        "notes": meta.notes,
        "lineItems": items,
        "total": round2(sum(item["quantity"] * item["unitPrice"] for item in items)),
    }


__all__ = [
    "LABOR_LINE_NAME",
    "DESCRIPTION_TEMPLATES",
    "line_item_name",
    "line_item_description",
    "application_line_item",
    "labor_total",
    "build_line_items",
    "build_quote_payload",
]
