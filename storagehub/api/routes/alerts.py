"""
Pricing Alert Routes

Endpoints:
  GET    /api/alerts/pricing     → units priced far from their size's market average
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from storagehub.database import get_db
from storagehub.schemas.analytics import PricingAlert
from storagehub.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/pricing", response_model=List[PricingAlert])
def get_pricing_alerts(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum number of alerts"),
    db: Session = Depends(get_db),
):
    """Pricing alerts, high priority first."""
    try:
        return AnalyticsService(db).get_pricing_alerts(limit)
    except Exception as e:
        logger.error(f"[alerts] pricing alerts failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute pricing alerts. Please try again.",
        )
