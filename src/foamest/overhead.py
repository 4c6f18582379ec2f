from __future__ import annotations

from .models import OVERHEAD_CATEGORIES, BusinessSettings, OverheadResult
from .numeric import safe_divide


def total_monthly_overhead(settings: BusinessSettings) -> float:
    return sum(float(getattr(settings, name)) for name in OVERHEAD_CATEGORIES)


def overhead_per_hour(settings: BusinessSettings) -> float:
    if settings.expected_monthly_hours <= 0:
        return 0.0
    return safe_divide(total_monthly_overhead(settings), settings.expected_monthly_hours)


def break_even_revenue(settings: BusinessSettings) -> float:
    """Monthly revenue needed to cover overhead while keeping the target net margin."""

    if settings.target_net_margin >= 100:
        return 0.0
    return safe_divide(total_monthly_overhead(settings), 1.0 - settings.target_net_margin / 100.0)


def allocate_overhead(settings: BusinessSettings, labor_hours: float, final_profit: float) -> OverheadResult:
    """Charge the job its share of monthly overhead by labor hours."""

    per_hour = overhead_per_hour(settings)
    job_overhead = per_hour * labor_hours
    return OverheadResult(
        total_monthly_overhead=total_monthly_overhead(settings),
        overhead_per_hour=per_hour,
        break_even_revenue=break_even_revenue(settings),
        job_overhead=job_overhead,
        true_net_profit=final_profit - job_overhead,
    )


__all__ = ["total_monthly_overhead", "overhead_per_hour", "break_even_revenue", "allocate_overhead"]
