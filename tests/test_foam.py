import pytest

from foamest.foam import (
    FOAM_DEFAULTS,
    compute_application,
    default_application,
    material_cost_per_set,
    reset_to_defaults,
    r_value,
)
from foamest.models import CLOSED_CELL, FoamApplication


def test_open_cell_defaults_over_1000_sqft(area_factory, open_app):
    result = compute_application(area_factory(area_sqft=1000), open_app)

    assert result.sqft == 1000
    assert result.board_feet == 6000
    assert result.sets == pytest.approx(0.42857, abs=1e-5)
    assert result.gallons == pytest.approx(42.857, abs=1e-3)
    assert result.material_cost_per_set == pytest.approx(2244)
    assert result.base_material_cost == pytest.approx(961.71, abs=0.01)
    assert result.markup_amount == pytest.approx(721.29, abs=0.01)
    assert result.raw_total == pytest.approx(1683.00, abs=0.01)
    assert result.price_per_sqft == 1.68
    # line total follows the rounded unit price, not the raw material total
    assert result.total_cost == pytest.approx(1680.00)
    assert result.r_value == pytest.approx(22.8)


def test_closed_cell_defaults_land_on_quoted_price(area_factory, closed_app):
    result = compute_application(area_factory(area_sqft=1000, apps=(closed_app,)), closed_app)

    assert result.sets == pytest.approx(0.5)
    assert result.gallons == pytest.approx(50)
    assert result.base_material_cost == pytest.approx(1482)
    assert result.price_per_sqft == 2.38
    assert result.total_cost == pytest.approx(2380)
    assert result.r_value == pytest.approx(14.4)


def test_unit_price_times_sqft_equals_line_total(area_factory, open_app):
    result = compute_application(area_factory(length=37, width=23.5), open_app)
    assert result.total_cost == pytest.approx(result.price_per_sqft * result.sqft)


def test_zero_sqft_prices_to_zero(area_factory, open_app):
    result = compute_application(area_factory(), open_app)
    assert result.price_per_sqft == 0
    assert result.total_cost == 0
    assert result.sets == 0


def test_zero_board_feet_per_set_is_guarded(area_factory):
    broken = FoamApplication(id=1, board_feet_per_set=0)
    result = compute_application(area_factory(area_sqft=100, apps=(broken,)), broken)
    assert result.sets == 0
    assert result.gallons == 0
    assert result.total_cost == 0


def test_factory_defaults_per_foam_type():
    open_cell = default_application(7, "open")
    closed_cell = default_application(8, "Closed Cell")
    assert (open_cell.foam_thickness, open_cell.material_price, open_cell.material_markup, open_cell.board_feet_per_set) == (
        6.0,
        1870.0,
        75.0,
        14000.0,
    )
    assert closed_cell.foam_type == CLOSED_CELL
    assert closed_cell.material_markup == pytest.approx(60.59)
    assert closed_cell.board_feet_per_set == 4000.0


def test_reselecting_foam_type_resets_fields_and_keeps_id(open_app):
    edited = FoamApplication(id=open_app.id, foam_thickness=9, material_price=2000)
    closed = reset_to_defaults(edited, CLOSED_CELL)
    assert closed.id == open_app.id
    assert closed.foam_type == CLOSED_CELL
    for name, value in FOAM_DEFAULTS[CLOSED_CELL].items():
        assert getattr(closed, name) == value


def test_material_cost_per_set_includes_landed_cost(closed_app):
    assert material_cost_per_set(closed_app) == pytest.approx(2964)
    assert r_value(closed_app) == pytest.approx(14.4)
