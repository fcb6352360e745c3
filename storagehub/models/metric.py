"""
Monthly Metric Model
One stored snapshot per calendar month ('YYYY-MM'), written by
AnalyticsService.calculate_current_metrics or the mock data seeder.
"""
from typing import Optional

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storagehub.db.base import Base, TimestampMixin


class MonthlyMetric(Base, TimestampMixin):
    __tablename__ = "metrics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    month: Mapped[str] = mapped_column(String(7), nullable=False, unique=True, index=True)

    total_revenue: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    occupancy_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)  # 0-100
    total_units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    occupied_units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    new_customers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    churned_customers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_rental_duration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Per-size breakdowns stored as JSON strings
    # Format: '{"5m²": 1850.0, "10m²": 2400.0, ...}'
    revenue_by_size: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    occupancy_by_size: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
