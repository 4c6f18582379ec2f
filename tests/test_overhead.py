import math

import pytest

from foamest.models import BusinessSettings
from foamest.overhead import allocate_overhead, break_even_revenue, overhead_per_hour, total_monthly_overhead

SETTINGS = BusinessSettings(
    salaries=9500,
    rent=1800,
    rig_lease=2200,
    truck_lease=850,
    insurance=1200,
    marketing=600,
    software=250,
    other=400,
    expected_monthly_hours=320,
    target_net_margin=20,
)


def test_overhead_sums_all_categories():
    assert total_monthly_overhead(SETTINGS) == 16800
    assert overhead_per_hour(SETTINGS) == pytest.approx(52.5)
    assert break_even_revenue(SETTINGS) == pytest.approx(21000)


def test_job_share_reduces_profit():
    result = allocate_overhead(SETTINGS, labor_hours=16, final_profit=1500)
    assert result.job_overhead == pytest.approx(840)
    assert result.true_net_profit == pytest.approx(660)


def test_zero_expected_hours_is_guarded():
    settings = BusinessSettings(rent=1000, expected_monthly_hours=0)
    assert overhead_per_hour(settings) == 0
    result = allocate_overhead(settings, labor_hours=10, final_profit=200)
    assert result.job_overhead == 0
    assert result.true_net_profit == 200
    assert not math.isnan(result.overhead_per_hour)


def test_target_margin_of_100_is_guarded():
    assert break_even_revenue(BusinessSettings(rent=1000, target_net_margin=100)) == 0
