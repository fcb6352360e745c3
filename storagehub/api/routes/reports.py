"""
Report Routes

Endpoints:
  GET    /api/reports/summary.csv   → dashboard summary, unit metrics and segments as CSV
"""
import io
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from storagehub.database import get_db
from storagehub.services.analytics_service import AnalyticsService
from storagehub.services.report_service import build_summary_csv, report_filename

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/summary.csv")
def export_summary_csv(db: Session = Depends(get_db)):
    service = AnalyticsService(db)
    try:
        content = build_summary_csv(
            service.get_dashboard_summary(),
            service.get_unit_size_metrics(),
            service.get_customer_segments(),
        )
    except Exception as e:
        logger.error(f"[reports] summary export failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build report. Please try again.",
        )

    filename = report_filename(service.as_of)
    return StreamingResponse(
        io.BytesIO(content.encode("utf-8-sig")),  # BOM so Excel detects UTF-8
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
