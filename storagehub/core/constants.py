"""
Analytics Constants
Thresholds, multipliers and reference tables used by the metrics,
pricing and forecast calculations.
"""
from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, model_validator


class UnitSize(str, Enum):
    SIZE_5 = "5m²"
    SIZE_10 = "10m²"
    SIZE_15 = "15m²"
    SIZE_20 = "20m²"
    SIZE_30 = "30m²"

    @property
    def sqm(self) -> int:
        return UNIT_SIZES[self].sqm


class CustomerType(str, Enum):
    PRIVATE = "private"
    BUSINESS = "business"


# ── Thresholds ─────────────────────────────────────────────────────────────

class OccupancyThresholds(BaseModel):
    """Occupancy rate bands for status indicators (percent, lower bound inclusive)."""
    model_config = ConfigDict(frozen=True)

    high: float = 85.0
    medium: float = 70.0


class PricingThresholds(BaseModel):
    """Occupancy rates that trigger a price change recommendation."""
    model_config = ConfigDict(frozen=True)

    increase_opportunity: float = 90.0  # strictly above -> increase
    decrease_needed: float = 70.0       # strictly below -> decrease


class PricingMultipliers(BaseModel):
    """
    Price / market-average ratios used to flag mispriced units.
    Ordering high_priority < underpriced < 1 < overpriced is enforced,
    so a high-priority underpriced unit is always underpriced too.
    """
    model_config = ConfigDict(frozen=True)

    underpriced_threshold: float = 0.85
    high_priority_threshold: float = 0.75
    overpriced_threshold: float = 1.10
    suggested_price_multiplier: float = 0.95

    @model_validator(mode="after")
    def check_ordering(self) -> "PricingMultipliers":
        if not (
            self.high_priority_threshold
            < self.underpriced_threshold
            < 1
            < self.overpriced_threshold
        ):
            raise ValueError(
                "multipliers must satisfy high_priority < underpriced < 1 < overpriced"
            )
        return self


class ForecastConfig(BaseModel):
    """Fixed-growth revenue projection settings."""
    model_config = ConfigDict(frozen=True)

    months_to_forecast: int = 3
    monthly_growth_rate: float = 1.02
    lower_bound_multiplier: float = 0.92
    upper_bound_multiplier: float = 1.08


OCCUPANCY_THRESHOLDS = OccupancyThresholds()
PRICING_THRESHOLDS = PricingThresholds()
PRICING_MULTIPLIERS = PricingMultipliers()
FORECAST_CONFIG = ForecastConfig()

MAX_PRICING_ALERTS = 8
TOP_CUSTOMERS_LIMIT = 10


# ── Unit sizes ─────────────────────────────────────────────────────────────

class UnitSizeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    base_price: float
    sqm: int


UNIT_SIZES: Dict[UnitSize, UnitSizeConfig] = {
    UnitSize.SIZE_5: UnitSizeConfig(count=40, base_price=49, sqm=5),
    UnitSize.SIZE_10: UnitSizeConfig(count=35, base_price=89, sqm=10),
    UnitSize.SIZE_15: UnitSizeConfig(count=25, base_price=129, sqm=15),
    UnitSize.SIZE_20: UnitSizeConfig(count=15, base_price=169, sqm=20),
    UnitSize.SIZE_30: UnitSizeConfig(count=10, base_price=239, sqm=30),
}

# Share of units expected to be rented, per size
TARGET_OCCUPANCY_RATES: Dict[UnitSize, float] = {
    UnitSize.SIZE_5: 0.92,
    UnitSize.SIZE_10: 0.88,
    UnitSize.SIZE_15: 0.82,
    UnitSize.SIZE_20: 0.75,
    UnitSize.SIZE_30: 0.65,
}


# ── Calendar ───────────────────────────────────────────────────────────────

MONTH_NAMES: Tuple[str, ...] = (
    "Jan", "Feb", "Mär", "Apr", "Mai", "Jun",
    "Jul", "Aug", "Sep", "Okt", "Nov", "Dez",
)


# ── UI labels (German) ─────────────────────────────────────────────────────

class Labels:
    PRICING_INCREASE = "Preiserhöhung um 5-10% möglich bei {size} Einheiten"
    PRICING_DECREASE = "Preissenkung um 5% empfohlen für {size} Einheiten"
    PRICING_MAINTAIN = "Preise für {size} Einheiten beibehalten"

    ALERT_HIGH_PRIORITY = "Preis liegt deutlich unter dem Durchschnitt für {size} ({avg:.2f} €)"
    ALERT_UNDERPRICED = "Preis liegt unter dem Durchschnitt für {size} ({avg:.2f} €)"
    ALERT_OVERPRICED = "Preis liegt über dem Durchschnitt für {size} ({avg:.2f} €)"

    CUSTOMER_TYPE = {
        CustomerType.PRIVATE: "Privat",
        CustomerType.BUSINESS: "Geschäft",
    }
    TREND_ABOVE_AVERAGE = "Über Ø"
    TREND_BELOW_AVERAGE = "Unter Ø"
