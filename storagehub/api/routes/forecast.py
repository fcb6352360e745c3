"""
Forecast Routes

Endpoints:
  GET    /api/forecast             → revenue history plus the next months' forecast
  GET    /api/forecast/seasonal    → revenue history with seasonal index
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from storagehub.database import get_db
from storagehub.schemas.analytics import ForecastSummary, SeasonalPoint
from storagehub.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=ForecastSummary)
def get_forecast(
    months: Optional[int] = Query(None, ge=1, le=24, description="Months to forecast"),
    db: Session = Depends(get_db),
):
    """
    Historical revenue followed by forecast months with a confidence band.

    Forecast points carry `forecast`, `lower_bound` and `upper_bound`;
    historical points only carry `actual`.
    """
    try:
        return AnalyticsService(db).get_forecast(months)
    except Exception as e:
        logger.error(f"[forecast] forecast failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute forecast. Please try again.",
        )


@router.get("/seasonal", response_model=List[SeasonalPoint])
def get_seasonal(db: Session = Depends(get_db)):
    try:
        return AnalyticsService(db).get_seasonal_data()
    except Exception as e:
        logger.error(f"[forecast] seasonal data failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute seasonal data. Please try again.",
        )
