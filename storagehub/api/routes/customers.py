"""
Customer Routes

Endpoints:
  GET    /api/customers                 → list customers (filter by type / active)
  GET    /api/customers/segments        → private vs business breakdown
  GET    /api/customers/top             → active customers by monthly revenue
  GET    /api/customers/trend           → new / churned customers per month
  GET    /api/customers/{customer_id}   → single customer
  POST   /api/customers                 → create customer
  PUT    /api/customers/{customer_id}   → update customer
  DELETE /api/customers/{customer_id}   → delete customer without units
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from storagehub.core.config import settings
from storagehub.core.constants import CustomerType
from storagehub.database import get_db
from storagehub.models import Customer
from storagehub.schemas.analytics import CustomerSegment, CustomerTrendPoint, TopCustomer
from storagehub.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate
from storagehub.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_customer_or_404(db: Session, customer_id: str) -> Customer:
    customer = db.query(Customer).filter(Customer.id == customer_id).first()
    if not customer:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    return customer


@router.get("/", response_model=List[CustomerResponse])
def list_customers(
    type: Optional[CustomerType] = Query(None, description="Filter by customer type"),
    active: Optional[bool] = Query(None, description="Only active (true) or former (false) customers"),
    skip: int = 0,
    limit: int = Query(settings.MAX_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """Get all customers"""
    query = db.query(Customer)
    if type is not None:
        query = query.filter(Customer.type == type)
    if active is True:
        query = query.filter(Customer.end_date.is_(None))
    elif active is False:
        query = query.filter(Customer.end_date.isnot(None))
    return query.order_by(Customer.id).offset(skip).limit(limit).all()


@router.get("/segments", response_model=List[CustomerSegment])
def get_customer_segments(db: Session = Depends(get_db)):
    """Count, share and revenue of private and business customers."""
    try:
        return AnalyticsService(db).get_customer_segments()
    except Exception as e:
        logger.error(f"[customers] segments failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute customer segments. Please try again.",
        )


@router.get("/top", response_model=List[TopCustomer])
def get_top_customers(
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of customers to return"),
    db: Session = Depends(get_db),
):
    """Active customers ranked by the monthly price of their units."""
    try:
        return AnalyticsService(db).get_top_customers(limit)
    except Exception as e:
        logger.error(f"[customers] top customers failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute top customers. Please try again.",
        )


@router.get("/trend", response_model=List[CustomerTrendPoint])
def get_customer_trend(db: Session = Depends(get_db)):
    """New, churned and net customer growth for each stored month."""
    try:
        return AnalyticsService(db).get_customer_trend()
    except Exception as e:
        logger.error(f"[customers] trend failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to compute customer trend. Please try again.",
        )


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(customer_id: str, db: Session = Depends(get_db)):
    """Get a specific customer"""
    return _get_customer_or_404(db, customer_id)


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(customer_in: CustomerCreate, db: Session = Depends(get_db)):
    """Create a new customer"""
    if db.query(Customer).filter(Customer.id == customer_in.id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Customer '{customer_in.id}' already exists",
        )
    customer = Customer(**customer_in.model_dump())
    db.add(customer)
    db.commit()
    db.refresh(customer)
    logger.info(f"[customers] Created customer {customer.id} ({customer.type.value})")
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: str, customer_update: CustomerUpdate, db: Session = Depends(get_db)
):
    """Update a customer"""
    customer = _get_customer_or_404(db, customer_id)
    changes = customer_update.model_dump(exclude_unset=True)

    start_date = changes.get("start_date", customer.start_date)
    end_date = changes.get("end_date", customer.end_date)
    if end_date and end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="end_date must not be before start_date",
        )

    for key, value in changes.items():
        setattr(customer, key, value)

    db.commit()
    db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: str, db: Session = Depends(get_db)):
    """Delete a customer that no longer rents any unit"""
    customer = _get_customer_or_404(db, customer_id)
    if customer.units:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Customer still has units assigned",
        )
    db.delete(customer)
    db.commit()
    return None
