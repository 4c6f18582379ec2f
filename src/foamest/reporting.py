from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from .models import Comparison, EstimateResult

if TYPE_CHECKING:
    from .api import JobReport

BREAKDOWN_COLUMNS = [
    "AREA_ID",
    "AREA",
    "AREA_TYPE",
    "FOAM_TYPE",
    "THICKNESS_IN",
    "SQFT",
    "BOARD_FEET",
    "SETS",
    "GALLONS",
    "BASE_MATERIAL_COST",
    "MARKUP_AMOUNT",
    "PRICE_PER_SQFT",
    "TOTAL_COST",
    "R_VALUE",
    "NOTES",
]


def breakdown_frame(estimate: EstimateResult) -> pd.DataFrame:
    """One row per foam application; areas excluded from totals appear with their error."""

    rows = []
    for area in estimate.areas:
        if area.error:
            rows.append(
                {
                    "AREA_ID": area.area_id,
                    "AREA": area.name,
                    "AREA_TYPE": area.area_type,
                    "NOTES": area.error,
                }
            )
            continue
        for app in area.applications:
            rows.append(
                {
                    "AREA_ID": area.area_id,
                    "AREA": area.name,
                    "AREA_TYPE": area.area_type,
                    "FOAM_TYPE": app.foam_type,
                    "THICKNESS_IN": app.foam_thickness,
                    "SQFT": app.sqft,
                    "BOARD_FEET": app.board_feet,
                    "SETS": app.sets,
                    "GALLONS": app.gallons,
                    "BASE_MATERIAL_COST": app.base_material_cost,
                    "MARKUP_AMOUNT": app.markup_amount,
                    "PRICE_PER_SQFT": app.price_per_sqft,
                    "TOTAL_COST": app.total_cost,
                    "R_VALUE": app.r_value,
                    "NOTES": "",
                }
            )
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def comparison_frame(comparison: Comparison) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "METRIC": [line.metric for line in comparison.lines],
            "ESTIMATE": [line.estimate for line in comparison.lines],
            "ACTUAL": [line.actual for line in comparison.lines],
        }
    )
    df["DELTA"] = df["ACTUAL"] - df["ESTIMATE"]
    return df


def make_summary_text(report: "JobReport") -> str:
    estimate = report.estimate
    actual = report.actual
    items = breakdown_frame(estimate)
    priced = items.loc[items["NOTES"].fillna("") == ""]
    top = priced.sort_values("TOTAL_COST", ascending=False).head(5)[
        ["AREA", "FOAM_TYPE", "THICKNESS_IN", "SQFT", "PRICE_PER_SQFT", "TOTAL_COST"]
    ]
    commission = estimate.commission
    overhead = estimate.overhead
    lines = [
        f"Customer price: ${estimate.customer_cost:,.2f} (base cost ${estimate.total_base_cost:,.2f}).",
        (
            f"Material: {estimate.total_gallons.open:,.1f} gal open / "
            f"{estimate.total_gallons.closed:,.1f} gal closed "
            f"({estimate.total_sets.total:,.2f} sets), base ${estimate.base_material_cost:,.2f} "
            f"+ markup ${estimate.material_markup_amount:,.2f}."
        ),
        (
            f"Labor: base ${estimate.base_labor_cost:,.2f} + markup ${estimate.labor_markup_amount:,.2f}; "
            f"fuel ${estimate.fuel_cost:,.2f}."
        ),
        (
            f"Margin before commission {commission.margin_before_commission:.1f}% -> "
            f"commission {commission.commission_rate * 100:.0f}% = ${commission.commission:,.2f}."
        ),
        f"Final profit ${commission.final_profit:,.2f} ({commission.final_margin:.1f}%).",
        (
            f"Overhead ${overhead.overhead_per_hour:,.2f}/hr -> job share ${overhead.job_overhead:,.2f}; "
            f"true net profit ${overhead.true_net_profit:,.2f}."
        ),
        f"Applications by price:\n{top.to_string(index=False) if not top.empty else '(none)'}",
    ]
    excluded = items.loc[items["NOTES"].fillna("") != ""]
    if not excluded.empty:
        lines.append(f"Excluded areas: {', '.join(str(name) for name in excluded['AREA'])}")
    if any(value is not None for value in vars(report.state.actuals).values()):
        lines.append(
            f"Actual true net profit ${actual.true_net_profit:,.2f} "
            f"({actual.true_net_profit - estimate.true_net_profit:+,.2f} vs estimate)."
        )
    return "\n".join(lines) + "\n"


__all__ = ["BREAKDOWN_COLUMNS", "breakdown_frame", "comparison_frame", "make_summary_text"]
