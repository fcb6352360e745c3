"""
Storage Unit Routes

Endpoints:
  GET    /api/units                  → list units (filter by size / occupancy)
  GET    /api/units/stats/by-size    → occupancy & revenue rollup per size
  GET    /api/units/{unit_id}        → single unit
  POST   /api/units                  → create unit
  PUT    /api/units/{unit_id}        → update unit
  DELETE /api/units/{unit_id}        → delete unit
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from storagehub.core.config import settings
from storagehub.core.constants import UnitSize
from storagehub.database import get_db
from storagehub.models import Customer, Unit
from storagehub.schemas.analytics import UnitSizeMetrics
from storagehub.schemas.unit import UnitCreate, UnitResponse, UnitUpdate
from storagehub.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_unit_or_404(db: Session, unit_id: str) -> Unit:
    unit = db.query(Unit).filter(Unit.id == unit_id).first()
    if not unit:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit not found")
    return unit


def _check_customer_exists(db: Session, customer_id: Optional[str]) -> None:
    if customer_id and not db.query(Customer).filter(Customer.id == customer_id).first():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Customer '{customer_id}' does not exist",
        )


@router.get("/", response_model=List[UnitResponse])
def list_units(
    size: Optional[UnitSize] = Query(None, description="Filter by unit size"),
    is_occupied: Optional[bool] = Query(None, description="Filter by occupancy"),
    skip: int = 0,
    limit: int = Query(settings.MAX_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """Get all units"""
    query = db.query(Unit)
    if size is not None:
        query = query.filter(Unit.size == size)
    if is_occupied is not None:
        query = query.filter(Unit.is_occupied == is_occupied)
    return query.order_by(Unit.id).offset(skip).limit(limit).all()


@router.get("/stats/by-size", response_model=List[UnitSizeMetrics])
def get_unit_size_stats(db: Session = Depends(get_db)):
    """Occupancy, average price and revenue per m² for each unit size."""
    try:
        return AnalyticsService(db).get_unit_size_metrics()
    except Exception as e:
        logger.error(f"[units] size stats failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute unit statistics. Please try again.",
        )


@router.get("/{unit_id}", response_model=UnitResponse)
def get_unit(unit_id: str, db: Session = Depends(get_db)):
    """Get a specific unit"""
    return _get_unit_or_404(db, unit_id)


@router.post("/", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
def create_unit(unit_in: UnitCreate, db: Session = Depends(get_db)):
    """Create a new unit"""
    if db.query(Unit).filter(Unit.id == unit_in.id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Unit '{unit_in.id}' already exists",
        )
    _check_customer_exists(db, unit_in.customer_id)

    unit = Unit(**unit_in.model_dump())
    db.add(unit)
    db.commit()
    db.refresh(unit)
    logger.info(f"[units] Created unit {unit.id} ({unit.size.value})")
    return unit


@router.put("/{unit_id}", response_model=UnitResponse)
def update_unit(unit_id: str, unit_update: UnitUpdate, db: Session = Depends(get_db)):
    """Update a unit"""
    unit = _get_unit_or_404(db, unit_id)
    changes = unit_update.model_dump(exclude_unset=True)

    # Vacating a unit releases its renter unless the request says otherwise
    if changes.get("is_occupied") is False and "customer_id" not in changes:
        changes["customer_id"] = None

    customer_id = changes.get("customer_id", unit.customer_id)
    is_occupied = changes.get("is_occupied", unit.is_occupied)
    if customer_id and not is_occupied:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="customer_id can only be set on an occupied unit",
        )
    if not is_occupied:
        changes["rented_since"] = None
    _check_customer_exists(db, changes.get("customer_id"))

    for key, value in changes.items():
        setattr(unit, key, value)

    db.commit()
    db.refresh(unit)
    return unit


@router.delete("/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_unit(unit_id: str, db: Session = Depends(get_db)):
    """Delete a unit"""
    unit = _get_unit_or_404(db, unit_id)
    db.delete(unit)
    db.commit()
    return None
