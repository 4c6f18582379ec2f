from __future__ import annotations

from typing import Sequence, Tuple

from .models import CommissionResult
from .numeric import safe_divide

# (minimum margin %, commission rate), highest bracket first; lower bounds inclusive
COMMISSION_TIERS: Sequence[Tuple[float, float]] = (
    (35.0, 0.12),
    (30.0, 0.10),
)


def commission_rate(margin: float) -> float:
    """Commission rate for a pre-commission margin expressed in percent."""

    for floor, rate in COMMISSION_TIERS:
        if margin >= floor:
            return rate
    return 0.0


def margin_percent(profit: float, customer_cost: float) -> float:
    if customer_cost <= 0:
        return 0.0
    return safe_divide(profit, customer_cost) * 100.0


def compute_commission(customer_cost: float, total_base_cost: float) -> CommissionResult:
    """Apply the sales commission tiers to the profit left between price and cost."""

    net_profit = customer_cost - total_base_cost
    margin = margin_percent(net_profit, customer_cost)
    rate = commission_rate(margin)
    commission = net_profit * rate
    final_profit = customer_cost - total_base_cost - commission
    return CommissionResult(
        net_profit_before_commission=net_profit,
        margin_before_commission=margin,
        commission_rate=rate,
        commission=commission,
        final_profit=final_profit,
        final_margin=margin_percent(final_profit, customer_cost),
    )


__all__ = ["COMMISSION_TIERS", "commission_rate", "margin_percent", "compute_commission"]
