"""
Analytics Service
Loads units, customers and stored monthly snapshots from the database,
converts them into domain records and runs the analytics calculations.

The calculations themselves live in metrics / pricing / forecast /
aggregation and never touch the session.
"""
import json
import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from storagehub.core.config import settings
from storagehub.core.constants import ForecastConfig, FORECAST_CONFIG
from storagehub.models import Customer, MonthlyMetric, Unit
from storagehub.schemas.analytics import (
    CustomerSegment,
    CustomerTrendPoint,
    DashboardSummary,
    ForecastSummary,
    OccupancyAnalytics,
    PricingAlert,
    SeasonalPoint,
    TopCustomer,
    UnitSizeMetrics,
    YearOverYearSeries,
)
from storagehub.schemas.metric import MonthlyMetricResponse
from storagehub.schemas.records import CustomerRecord, MonthlyMetricRecord, UnitRecord
from storagehub.services import aggregation, forecast, pricing
from storagehub.services.metrics import average

logger = logging.getLogger(__name__)


# ── Row conversion ─────────────────────────────────────────────────────────

def unit_to_record(unit: Unit) -> UnitRecord:
    return UnitRecord(
        id=unit.id,
        size=unit.size,
        price_per_month=unit.price_per_month,
        is_occupied=bool(unit.is_occupied),
        customer_id=unit.customer_id,
        rented_since=unit.rented_since,
    )


def customer_to_record(customer: Customer) -> CustomerRecord:
    return CustomerRecord(
        id=customer.id,
        name=customer.name,
        type=customer.type,
        start_date=customer.start_date,
        end_date=customer.end_date,
        unit_ids=customer.unit_ids,
    )


def metric_to_record(row: MonthlyMetric) -> MonthlyMetricRecord:
    year, month_index = MonthlyMetricRecord.parse_month_key(row.month)
    return MonthlyMetricRecord(
        year=year,
        month_index=month_index,
        revenue=row.total_revenue or 0.0,
        occupancy_rate=row.occupancy_rate or 0.0,
        total_units=row.total_units or 0,
        occupied_units=row.occupied_units or 0,
        new_customers=row.new_customers or 0,
        churned_customers=row.churned_customers or 0,
    )


def _load_json_map(raw: Optional[str]) -> dict:
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return {}


def metric_to_response(row: MonthlyMetric) -> MonthlyMetricResponse:
    return MonthlyMetricResponse(
        month=row.month,
        total_revenue=row.total_revenue or 0.0,
        occupancy_rate=row.occupancy_rate or 0.0,
        total_units=row.total_units or 0,
        occupied_units=row.occupied_units or 0,
        new_customers=row.new_customers or 0,
        churned_customers=row.churned_customers or 0,
        average_rental_duration=row.average_rental_duration,
        revenue_by_size=_load_json_map(row.revenue_by_size),
        occupancy_by_size=_load_json_map(row.occupancy_by_size),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class AnalyticsService:
    """Database-backed entry point for all dashboard analytics."""

    def __init__(self, db: Session, as_of: Optional[date] = None):
        self.db = db
        self.as_of = as_of or date.today()

    # ─────────────────────────────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────────────────────────────

    def load_units(self) -> List[UnitRecord]:
        rows = self.db.query(Unit).order_by(Unit.id).all()
        return [unit_to_record(u) for u in rows]

    def load_customers(self) -> List[CustomerRecord]:
        rows = (
            self.db.query(Customer)
            .options(selectinload(Customer.units))
            .order_by(Customer.id)
            .all()
        )
        return [customer_to_record(c) for c in rows]

    def metric_rows(
        self, start: Optional[str] = None, end: Optional[str] = None
    ) -> List[MonthlyMetric]:
        """Stored snapshots oldest to newest, optionally within [start, end]."""
        query = self.db.query(MonthlyMetric)
        if start:
            query = query.filter(MonthlyMetric.month >= start)
        if end:
            query = query.filter(MonthlyMetric.month <= end)
        return query.order_by(MonthlyMetric.month.asc()).all()

    def load_metrics(self) -> List[MonthlyMetricRecord]:
        return [metric_to_record(r) for r in self.metric_rows()]

    # ─────────────────────────────────────────────────────────────────────
    # Dashboard & revenue
    # ─────────────────────────────────────────────────────────────────────

    def get_dashboard_summary(self) -> DashboardSummary:
        return aggregation.dashboard_summary(
            self.load_metrics(), self.load_customers(), self.load_units(), self.as_of
        )

    def get_year_over_year(self, current_year: Optional[int] = None) -> YearOverYearSeries:
        return aggregation.year_over_year(self.load_metrics(), current_year)

    # ─────────────────────────────────────────────────────────────────────
    # Units & pricing
    # ─────────────────────────────────────────────────────────────────────

    def get_unit_size_metrics(self) -> List[UnitSizeMetrics]:
        return aggregation.unit_size_metrics(self.load_units())

    def get_occupancy_analytics(self) -> OccupancyAnalytics:
        size_metrics = self.get_unit_size_metrics()
        most = aggregation.most_profitable_size(size_metrics)
        least = aggregation.least_profitable_size(size_metrics)
        return OccupancyAnalytics(
            unit_sizes=size_metrics,
            recommendations=pricing.generate_pricing_recommendations(size_metrics),
            most_profitable_size=most.size if most else None,
            least_profitable_size=least.size if least else None,
            turnover_rate=round(aggregation.unit_turnover_rate(self.load_metrics()), 1),
        )

    def get_pricing_alerts(self, limit: Optional[int] = None) -> List[PricingAlert]:
        limit = settings.MAX_PRICING_ALERTS if limit is None else limit
        return pricing.generate_pricing_alerts(self.load_units(), limit=limit)

    # ─────────────────────────────────────────────────────────────────────
    # Customers
    # ─────────────────────────────────────────────────────────────────────

    def get_customer_segments(self) -> List[CustomerSegment]:
        return aggregation.customer_segments(self.load_customers(), self.load_units())

    def get_top_customers(self, limit: Optional[int] = None) -> List[TopCustomer]:
        limit = settings.TOP_CUSTOMERS_LIMIT if limit is None else limit
        return aggregation.top_customers(self.load_customers(), self.load_units(), limit)

    def get_customer_trend(self) -> List[CustomerTrendPoint]:
        return aggregation.customer_trend(self.load_metrics())

    # ─────────────────────────────────────────────────────────────────────
    # Forecast
    # ─────────────────────────────────────────────────────────────────────

    def get_forecast(self, months_ahead: Optional[int] = None) -> ForecastSummary:
        config = self._forecast_config()
        points = forecast.generate_forecast(self.load_metrics(), config, months_ahead)
        return ForecastSummary(
            points=points,
            total_forecast=forecast.total_forecast(points),
            forecast_start_month=forecast.forecast_start_month(points),
        )

    def get_seasonal_data(self) -> List[SeasonalPoint]:
        return forecast.add_seasonal_index(self.load_metrics())

    @staticmethod
    def _forecast_config() -> ForecastConfig:
        if settings.FORECAST_MONTHS == FORECAST_CONFIG.months_to_forecast:
            return FORECAST_CONFIG
        return FORECAST_CONFIG.model_copy(update={"months_to_forecast": settings.FORECAST_MONTHS})

    # ─────────────────────────────────────────────────────────────────────
    # Snapshots
    # ─────────────────────────────────────────────────────────────────────

    def get_metric(self, month: str) -> Optional[MonthlyMetric]:
        return self.db.query(MonthlyMetric).filter(MonthlyMetric.month == month).first()

    def calculate_current_metrics(self) -> MonthlyMetric:
        """
        Compute the snapshot for the month containing `as_of` and upsert it.
        """
        units = self.load_units()
        customers = self.load_customers()
        snapshot = aggregation.build_monthly_snapshot(units, customers, self.as_of)
        size_metrics = aggregation.unit_size_metrics(units)
        rental_durations = [
            aggregation.months_between(u.rented_since, self.as_of)
            for u in units
            if u.is_occupied and u.rented_since
        ]

        values = dict(
            total_revenue=snapshot.revenue,
            occupancy_rate=snapshot.occupancy_rate,
            total_units=snapshot.total_units,
            occupied_units=snapshot.occupied_units,
            new_customers=snapshot.new_customers,
            churned_customers=snapshot.churned_customers,
            average_rental_duration=round(average(rental_durations), 2),
            revenue_by_size=json.dumps({m.size.value: m.total_revenue for m in size_metrics}),
            occupancy_by_size=json.dumps({m.size.value: m.occupancy_rate for m in size_metrics}),
        )

        row = self.get_metric(snapshot.month_key)
        try:
            if row:
                for key, value in values.items():
                    setattr(row, key, value)
            else:
                row = MonthlyMetric(month=snapshot.month_key, **values)
                self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except Exception as e:
            self.db.rollback()
            logger.error(f"[AnalyticsService] Snapshot for {snapshot.month_key} failed: {e}")
            raise

        logger.info(
            f"[AnalyticsService] Stored {snapshot.month_key}: "
            f"{snapshot.occupied_units}/{snapshot.total_units} units, "
            f"revenue={snapshot.revenue}, occupancy={snapshot.occupancy_rate}%"
        )
        return row
