"""
Monthly Metrics & Dashboard Routes

Endpoints:
  GET    /api/metrics                 → stored monthly snapshots (optional start / end)
  GET    /api/metrics/dashboard       → headline KPIs
  GET    /api/metrics/revenue         → year-over-year revenue comparison
  GET    /api/metrics/occupancy       → per-size occupancy, pricing recommendations
  GET    /api/metrics/{month}         → one snapshot ("YYYY-MM")
  POST   /api/metrics/calculate       → compute & store the current month
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from storagehub.database import get_db
from storagehub.schemas.analytics import DashboardSummary, OccupancyAnalytics, YearOverYearSeries
from storagehub.schemas.metric import MonthlyMetricResponse
from storagehub.services.analytics_service import AnalyticsService, metric_to_response

logger = logging.getLogger(__name__)

router = APIRouter()

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


@router.get("/", response_model=List[MonthlyMetricResponse])
def list_metrics(
    start: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="First month, YYYY-MM"),
    end: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="Last month, YYYY-MM"),
    db: Session = Depends(get_db),
):
    """Stored snapshots, oldest first."""
    rows = AnalyticsService(db).metric_rows(start, end)
    return [metric_to_response(r) for r in rows]


@router.get("/dashboard", response_model=DashboardSummary)
def get_dashboard(db: Session = Depends(get_db)):
    """Occupancy, revenue, churn and lifetime value for the dashboard header."""
    try:
        return AnalyticsService(db).get_dashboard_summary()
    except Exception as e:
        logger.error(f"[metrics] dashboard failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute dashboard. Please try again.",
        )


@router.get("/revenue", response_model=YearOverYearSeries)
def get_revenue_comparison(
    year: Optional[int] = Query(None, ge=1900, le=2999, description="Year to compare with the one before"),
    db: Session = Depends(get_db),
):
    """Monthly revenue of a year against the previous year."""
    try:
        return AnalyticsService(db).get_year_over_year(year)
    except Exception as e:
        logger.error(f"[metrics] revenue comparison failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute revenue comparison. Please try again.",
        )


@router.get("/occupancy", response_model=OccupancyAnalytics)
def get_occupancy(db: Session = Depends(get_db)):
    try:
        return AnalyticsService(db).get_occupancy_analytics()
    except Exception as e:
        logger.error(f"[metrics] occupancy analytics failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute occupancy analytics. Please try again.",
        )


@router.post("/calculate", response_model=MonthlyMetricResponse)
def calculate_metrics(db: Session = Depends(get_db)):
    """Recompute the snapshot for the current month from live unit data."""
    try:
        row = AnalyticsService(db).calculate_current_metrics()
    except Exception as e:
        logger.error(f"[metrics] calculate failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to calculate metrics. Please try again.",
        )
    return metric_to_response(row)


@router.get("/{month}", response_model=MonthlyMetricResponse)
def get_metric(
    month: str = Path(..., pattern=MONTH_PATTERN, description="Month, YYYY-MM"),
    db: Session = Depends(get_db),
):
    row = AnalyticsService(db).get_metric(month)
    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No metrics stored for {month}",
        )
    return metric_to_response(row)
