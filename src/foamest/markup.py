"""
Two-way derivations between markups and the prices a salesperson quotes.

Labor markup and the charged hourly rate, and material markup and the price
per square foot, describe the same number from two sides. The estimator stores
only the markups; the ``commit_*`` helpers turn an edited price back into a
markup once, when the user commits the edit, and refuse prices below cost.
"""

from __future__ import annotations

from dataclasses import replace

from .errors import MarkupBelowFloorRejected
from .foam import material_cost_per_set
from .models import FoamApplication, GlobalInputs
from .numeric import coerce_non_negative, round2, safe_divide


def charged_labor_rate(inputs: GlobalInputs) -> float:
    return inputs.manual_labor_rate * (1.0 + inputs.labor_markup / 100.0)


def labor_markup_for_rate(manual_labor_rate: float, charged_rate: float) -> float:
    """Markup percentage that turns ``manual_labor_rate`` into ``charged_rate``.

    Rejects rates below the actual labor rate. With no actual rate there is
    nothing to mark up and the markup is 0.
    """

    if charged_rate < manual_labor_rate:
        raise MarkupBelowFloorRejected(
            f"Charged rate must be at least ${manual_labor_rate:,.2f} (the Actual Labor Rate)",
            minimum=manual_labor_rate,
        )
    if manual_labor_rate <= 0:
        return 0.0
    return (charged_rate / manual_labor_rate - 1.0) * 100.0


def commit_charged_labor_rate(inputs: GlobalInputs, value: object) -> GlobalInputs:
    """Derive the labor markup from an edited charged rate.

    The floor is checked against the rate as entered; the markup is then
    derived from the rate rounded to cents so that re-committing the displayed
    rate leaves the markup unchanged. A rate that rounds to the actual rate
    carries no markup.
    """

    entered = coerce_non_negative(value)
    labor_markup_for_rate(inputs.manual_labor_rate, entered)
    charged = round2(entered)
    if charged == round2(inputs.manual_labor_rate):
        return replace(inputs, labor_markup=0.0)
    return replace(inputs, labor_markup=labor_markup_for_rate(inputs.manual_labor_rate, charged))


def min_price_per_sqft(app: FoamApplication) -> float:
    """Zero-markup floor: what one square foot costs at ``app``'s thickness."""

    return safe_divide(app.foam_thickness, app.board_feet_per_set) * material_cost_per_set(app)


def price_per_sqft(app: FoamApplication) -> float:
    """Quoted price per square foot implied by ``app``'s markup, independent of area size."""

    return round2(min_price_per_sqft(app) * (1.0 + app.material_markup / 100.0))


def material_markup_for_price(app: FoamApplication, price: float) -> float:
    minimum = min_price_per_sqft(app)
    if round2(price) < round2(minimum):
        raise MarkupBelowFloorRejected(
            f"Price must be at least ${round2(minimum):,.2f} (derived from Material Cost per Set)",
            minimum=round2(minimum),
        )
    price_per_set = price * safe_divide(app.board_feet_per_set, app.foam_thickness)
    cost_per_set = material_cost_per_set(app)
    if cost_per_set <= 0:
        return 0.0
    return max(0.0, (price_per_set / cost_per_set - 1.0) * 100.0)


def commit_price_per_sqft(app: FoamApplication, value: object) -> FoamApplication:
    price = round2(coerce_non_negative(value))
    return replace(app, material_markup=material_markup_for_price(app, price))


__all__ = [
    "charged_labor_rate",
    "labor_markup_for_rate",
    "commit_charged_labor_rate",
    "min_price_per_sqft",
    "price_per_sqft",
    "material_markup_for_price",
    "commit_price_per_sqft",
]
