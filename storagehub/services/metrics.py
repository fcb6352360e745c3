"""
Metrics Primitives
Single-formula calculations shared by the pricing, forecast and
aggregation code. Every function is total: division by zero yields 0
instead of raising.
"""
from typing import Iterable, Optional

from storagehub.core.constants import OCCUPANCY_THRESHOLDS, OccupancyThresholds
from storagehub.schemas.analytics import Comparison, OccupancyStatus


def occupancy_rate(occupied_units: float, total_units: float) -> float:
    """Occupied share of units as a percentage (0-100)."""
    if total_units == 0:
        return 0.0
    return occupied_units / total_units * 100


def revenue_per_sqm(total_revenue: float, total_sqm: float) -> float:
    if total_sqm == 0:
        return 0.0
    return total_revenue / total_sqm


def percentage_change(current: float, previous: float) -> float:
    """
    Relative change from `previous` to `current` in percent.

    A zero baseline is reported as +100% growth when the current value is
    positive and 0% otherwise.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def average(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def turnover_rate(new_customers: int, churned_customers: int, occupied_units: int) -> float:
    """Customer movements (in + out) relative to occupied units, in percent."""
    if occupied_units == 0:
        return 0.0
    return (new_customers + churned_customers) / occupied_units * 100


def net_growth(new_customers: int, churned_customers: int) -> int:
    return new_customers - churned_customers


def compare_to_average(value: float, avg: float) -> Comparison:
    if value > avg:
        return "above"
    if value < avg:
        return "below"
    return "equal"


def occupancy_status(
    rate: float, thresholds: Optional[OccupancyThresholds] = None
) -> OccupancyStatus:
    """Classify an occupancy rate as 'high', 'medium' or 'low'."""
    thresholds = thresholds or OCCUPANCY_THRESHOLDS
    if rate >= thresholds.high:
        return "high"
    if rate >= thresholds.medium:
        return "medium"
    return "low"
