"""
Pricing Recommendation Engine

Two independent signals:
  - Size-level: occupancy of a unit size above/below fixed thresholds
    suggests raising or lowering its prices.
  - Unit-level: a unit's price compared with the average price of all units
    of the same size flags under- and overpriced units.
"""
import logging
from typing import Dict, List, Optional, Sequence

from storagehub.core.constants import (
    MAX_PRICING_ALERTS,
    PRICING_MULTIPLIERS,
    PRICING_THRESHOLDS,
    Labels,
    PricingMultipliers,
    PricingThresholds,
    UnitSize,
)
from storagehub.schemas.analytics import (
    PricingAlert,
    PricingRecommendation,
    UnitSizeMetrics,
)
from storagehub.schemas.records import UnitRecord
from storagehub.services.metrics import average

logger = logging.getLogger(__name__)

_PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}

_RECOMMENDATION_TEMPLATES = {
    "increase": Labels.PRICING_INCREASE,
    "decrease": Labels.PRICING_DECREASE,
    "maintain": Labels.PRICING_MAINTAIN,
}


def pricing_recommendation(
    rate: float, thresholds: Optional[PricingThresholds] = None
) -> str:
    """
    Map an occupancy rate to 'increase', 'decrease' or 'maintain'.
    Both comparisons are strict, so a rate equal to a threshold is 'maintain'.
    """
    thresholds = thresholds or PRICING_THRESHOLDS
    if rate > thresholds.increase_opportunity:
        return "increase"
    if rate < thresholds.decrease_needed:
        return "decrease"
    return "maintain"


def is_underpriced(
    price: float, market_avg: float, multipliers: Optional[PricingMultipliers] = None
) -> bool:
    multipliers = multipliers or PRICING_MULTIPLIERS
    return price < market_avg * multipliers.underpriced_threshold


def is_high_priority_underpriced(
    price: float, market_avg: float, multipliers: Optional[PricingMultipliers] = None
) -> bool:
    multipliers = multipliers or PRICING_MULTIPLIERS
    return price < market_avg * multipliers.high_priority_threshold


def is_overpriced(
    price: float, market_avg: float, multipliers: Optional[PricingMultipliers] = None
) -> bool:
    multipliers = multipliers or PRICING_MULTIPLIERS
    return price > market_avg * multipliers.overpriced_threshold


def suggested_price(
    market_avg: float, multipliers: Optional[PricingMultipliers] = None
) -> int:
    multipliers = multipliers or PRICING_MULTIPLIERS
    return round(market_avg * multipliers.suggested_price_multiplier)


def generate_pricing_recommendations(
    unit_size_data: Sequence[UnitSizeMetrics],
    thresholds: Optional[PricingThresholds] = None,
) -> List[PricingRecommendation]:
    """One recommendation per unit size, with a localized message."""
    recommendations = []
    for size_metrics in unit_size_data:
        rec_type = pricing_recommendation(size_metrics.occupancy_rate, thresholds)
        message = _RECOMMENDATION_TEMPLATES[rec_type].format(size=size_metrics.size.value)
        recommendations.append(
            PricingRecommendation(
                size=size_metrics.size,
                occupancy=size_metrics.occupancy_rate,
                recommendation=message,
                type=rec_type,
            )
        )
    return recommendations


def market_averages(units: Sequence[UnitRecord]) -> Dict[UnitSize, float]:
    """Average price per unit size across all units of that size."""
    prices: Dict[UnitSize, List[float]] = {}
    for unit in units:
        prices.setdefault(unit.size, []).append(unit.price_per_month)
    return {size: average(vals) for size, vals in prices.items()}


def classify_unit_price(
    unit: UnitRecord,
    market_avg: float,
    multipliers: Optional[PricingMultipliers] = None,
) -> Optional[PricingAlert]:
    """Return an alert for a mispriced unit, or None if it is within range."""
    price = unit.price_per_month
    if is_high_priority_underpriced(price, market_avg, multipliers):
        priority, template = "high", Labels.ALERT_HIGH_PRIORITY
    elif is_underpriced(price, market_avg, multipliers):
        priority, template = "medium", Labels.ALERT_UNDERPRICED
    elif is_overpriced(price, market_avg, multipliers):
        priority, template = "low", Labels.ALERT_OVERPRICED
    else:
        return None

    return PricingAlert(
        unit_id=unit.id,
        size=unit.size,
        current_price=price,
        suggested_price=suggested_price(market_avg, multipliers),
        reason=template.format(size=unit.size.value, avg=market_avg),
        priority=priority,
    )


def generate_pricing_alerts(
    units: Sequence[UnitRecord],
    limit: int = MAX_PRICING_ALERTS,
    multipliers: Optional[PricingMultipliers] = None,
) -> List[PricingAlert]:
    """
    Flag units priced away from their size's market average.
    Ordered by priority (high first), then unit id; truncated to `limit`.
    """
    averages = market_averages(units)
    alerts = []
    for unit in units:
        alert = classify_unit_price(unit, averages[unit.size], multipliers)
        if alert is not None:
            alerts.append(alert)

    alerts.sort(key=lambda a: (_PRIORITY_ORDER[a.priority], a.unit_id))
    if len(alerts) > limit:
        logger.debug(f"[Pricing] {len(alerts)} alerts, returning top {limit}")
    return alerts[:limit]
