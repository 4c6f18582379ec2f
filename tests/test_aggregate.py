import pytest

from foamest.aggregate import area_breakdown, estimate_job
from foamest.foam import default_application
from foamest.models import CLOSED_CELL, OPEN_CELL, ROOF_DECK, BusinessSettings, GlobalInputs


def test_single_open_cell_area_prices_the_job(area_factory, job_inputs):
    result = estimate_job([area_factory(area_sqft=1000)], job_inputs)

    assert result.total_gallons.open == pytest.approx(1000 * 6 / 14000 * 100)
    assert result.total_gallons.closed == 0
    assert result.base_material_cost == pytest.approx(1000 * 6 / 14000 * 2244)
    assert result.material_markup_amount == pytest.approx(result.base_material_cost * 0.75)
    assert result.base_labor_cost == 400
    assert result.labor_markup_amount == 200
    assert result.fuel_cost == 25
    assert result.total_base_cost == pytest.approx(1511.714, abs=1e-3)
    assert result.customer_cost == pytest.approx(2433.0)
    assert result.commission.margin_before_commission == pytest.approx(37.87, abs=0.01)
    assert result.commission.commission_rate == 0.12


def test_customer_cost_uses_unrounded_markups(area_factory, job_inputs):
    result = estimate_job([area_factory(area_sqft=1000)], job_inputs)
    line_total = result.areas[0].applications[0].total_cost
    assert line_total == pytest.approx(1680.0)
    # the job total keeps the raw material markup, not the rounded line price
    assert result.base_material_cost + result.material_markup_amount == pytest.approx(1683.0)


def test_gallons_split_by_foam_type(area_factory, job_inputs):
    apps = (default_application(1, OPEN_CELL), default_application(2, CLOSED_CELL))
    result = estimate_job([area_factory(area_sqft=800, apps=apps)], job_inputs)
    assert result.total_gallons.open == pytest.approx(800 * 6 / 14000 * 100)
    assert result.total_gallons.closed == pytest.approx(800 * 2 / 4000 * 100)
    assert result.total_sets.total == pytest.approx(800 * 6 / 14000 + 800 * 2 / 4000)
    assert len(result.applications) == 2


def test_invalid_pitch_area_is_excluded(area_factory, job_inputs, caplog):
    good = area_factory(area_id=1, area_sqft=1000)
    bad = area_factory(area_id=2, name="Porch", area_type=ROOF_DECK, length=10, width=10, roof_pitch="steep")

    with caplog.at_level("WARNING"):
        result = estimate_job([good, bad], job_inputs)

    assert result.customer_cost == pytest.approx(2433.0)
    excluded = result.areas[1]
    assert excluded.error
    assert excluded.applications == ()
    assert excluded.total_cost == 0
    assert "Porch" in caplog.text


def test_area_breakdown_uses_pitched_sqft(area_factory):
    breakdown = area_breakdown(area_factory(area_type=ROOF_DECK, length=40, width=30, roof_pitch="12/12"))
    assert breakdown.sqft == pytest.approx(1200 * 2 ** 0.5)
    assert breakdown.applications[0].sqft == breakdown.sqft


def test_empty_job_has_only_fixed_costs():
    inputs = GlobalInputs(waste_disposal=50, equipment_rental=100)
    result = estimate_job([], inputs)
    assert result.total_base_cost == 150
    assert result.customer_cost == 150
    assert result.commission.margin_before_commission == 0
    assert result.final_profit == 0


def test_overhead_allocated_by_labor_hours(area_factory, job_inputs):
    settings = BusinessSettings(rent=1600, expected_monthly_hours=160)
    result = estimate_job([area_factory(area_sqft=1000)], job_inputs, settings)
    assert result.overhead.overhead_per_hour == pytest.approx(10)
    assert result.job_overhead == pytest.approx(100)
    assert result.true_net_profit == pytest.approx(result.final_profit - 100)
