"""
Analytics Schemas
Derived view models returned by the analytics calculations and endpoints.
"""
from pydantic import BaseModel
from typing import Literal, Optional, List
from datetime import date

from storagehub.core.constants import CustomerType, UnitSize


RecommendationType = Literal["increase", "decrease", "maintain"]
Priority = Literal["high", "medium", "low"]
Comparison = Literal["above", "below", "equal"]
OccupancyStatus = Literal["high", "medium", "low"]


class UnitSizeMetrics(BaseModel):
    """Occupancy and revenue rollup for one unit size."""
    size: UnitSize
    total_units: int
    occupied_units: int
    available_units: int
    occupancy_rate: float      # percent, 1 dp
    avg_price: float           # all units of the size, occupied or not
    revenue_per_sqm: float     # total_revenue / rentable area of the size
    total_revenue: float       # occupied units only


class CustomerSegment(BaseModel):
    type: CustomerType
    count: int
    percentage: float          # share of all customers, 1 dp
    total_revenue: float


class TopCustomer(BaseModel):
    id: str
    name: str
    type: CustomerType
    start_date: date
    end_date: Optional[date] = None
    unit_ids: List[str] = []
    units_count: int
    monthly_revenue: float


class PricingRecommendation(BaseModel):
    size: UnitSize
    occupancy: float
    recommendation: str
    type: RecommendationType


class PricingAlert(BaseModel):
    unit_id: str
    size: UnitSize
    current_price: float
    suggested_price: float
    reason: str
    priority: Priority


class ForecastPoint(BaseModel):
    """
    One month of the revenue timeline. Historical months carry `actual`,
    projected months carry `forecast` and both bounds.
    """
    month: str
    actual: Optional[float] = None
    forecast: Optional[float] = None
    lower_bound: Optional[float] = None
    upper_bound: Optional[float] = None


class ForecastSummary(BaseModel):
    points: List[ForecastPoint]
    total_forecast: float
    forecast_start_month: Optional[str] = None


class SeasonalPoint(BaseModel):
    month: str
    year: Optional[int] = None
    revenue: float
    occupancy_rate: float
    seasonal_index: float


class CustomerTrendPoint(BaseModel):
    month: str
    year: Optional[int] = None
    new_customers: int
    churned_customers: int
    net_growth: int


class YearOverYearPoint(BaseModel):
    month: str
    month_index: int
    current_year: float
    previous_year: float
    difference: float          # percent, 1 dp


class YearOverYearSeries(BaseModel):
    current_year: int
    previous_year: int
    months: List[YearOverYearPoint]
    current_year_total: float
    previous_year_total: float
    overall_growth: float


class DashboardSummary(BaseModel):
    total_occupancy_rate: float
    monthly_revenue: float
    revenue_change_percent: float
    revenue_change_vs_last_year: float
    avg_rental_duration: float          # months
    total_units: int
    occupied_units: int
    available_units: int
    total_customers: int
    churn_rate: float
    avg_customer_lifetime_value: float


class OccupancyAnalytics(BaseModel):
    """Response for /metrics/occupancy."""
    unit_sizes: List[UnitSizeMetrics]
    recommendations: List[PricingRecommendation]
    most_profitable_size: Optional[UnitSize] = None
    least_profitable_size: Optional[UnitSize] = None
    turnover_rate: float
