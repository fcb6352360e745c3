"""
Forecast Engine
Revenue projection with a fixed monthly growth rate and a fixed-percentage
confidence band, plus a sine-shaped seasonal index.

These are closed-form modelling simplifications: the seasonal curve is not
fitted to the data and the band is not a statistical interval.
"""
import math
from typing import List, Optional, Sequence, Tuple

from storagehub.core.constants import FORECAST_CONFIG, MONTH_NAMES, ForecastConfig
from storagehub.schemas.analytics import ForecastPoint, SeasonalPoint
from storagehub.schemas.records import MonthlyMetricRecord

# Position used to advance month labels when there is no history (December,
# so the first projected month is January).
_DEFAULT_LAST_MONTH_INDEX = 11


def seasonal_index(month_index: int, amplitude: float = 0.1, phase_shift: float = 2) -> float:
    """1.0 = baseline, above 1 = high season, below 1 = low season."""
    return 1 + math.sin((month_index - phase_shift) * math.pi / 6) * amplitude


def forecast_value(
    base_value: float, months_ahead: int, config: Optional[ForecastConfig] = None
) -> float:
    """Compound growth from `base_value` over `months_ahead` months."""
    config = config or FORECAST_CONFIG
    return base_value * config.monthly_growth_rate ** months_ahead


def confidence_interval(
    value: float, config: Optional[ForecastConfig] = None
) -> Tuple[float, float]:
    """Return (lower_bound, upper_bound) around a forecast value."""
    config = config or FORECAST_CONFIG
    return value * config.lower_bound_multiplier, value * config.upper_bound_multiplier


def generate_forecast(
    history: Sequence[MonthlyMetricRecord],
    config: Optional[ForecastConfig] = None,
    months_ahead: Optional[int] = None,
) -> List[ForecastPoint]:
    """
    Historical revenue points followed by projected ones.

    `history` must be ordered oldest to newest; projections start from the
    last month's revenue. With no history the base is 0 and all projected
    values are 0.
    """
    config = config or FORECAST_CONFIG
    horizon = config.months_to_forecast if months_ahead is None else months_ahead

    points = [ForecastPoint(month=m.label, actual=m.revenue) for m in history]

    if history:
        base = history[-1].revenue
        last_index = history[-1].month_index
    else:
        base = 0.0
        last_index = _DEFAULT_LAST_MONTH_INDEX

    for i in range(1, horizon + 1):
        value = forecast_value(base, i, config)
        lower, upper = confidence_interval(value, config)
        points.append(
            ForecastPoint(
                month=MONTH_NAMES[(last_index + i) % 12],
                forecast=round(value),
                lower_bound=round(lower),
                upper_bound=round(upper),
            )
        )
    return points


def total_forecast(points: Sequence[ForecastPoint]) -> float:
    """Sum of projected values, historical months excluded."""
    return sum(p.forecast for p in points if p.forecast is not None)


def forecast_start_month(points: Sequence[ForecastPoint]) -> Optional[str]:
    for point in points:
        if point.forecast is not None:
            return point.month
    return None


def add_seasonal_index(history: Sequence[MonthlyMetricRecord]) -> List[SeasonalPoint]:
    """Annotate each month with the seasonal index of its series position."""
    return [
        SeasonalPoint(
            month=m.label,
            year=m.year,
            revenue=m.revenue,
            occupancy_rate=m.occupancy_rate,
            seasonal_index=seasonal_index(position),
        )
        for position, m in enumerate(history)
    ]
