from pydantic import BaseModel
from datetime import datetime
from typing import Dict, Optional


class MonthlyMetricResponse(BaseModel):
    """A stored monthly snapshot."""
    month: str                  # "YYYY-MM"
    total_revenue: float
    occupancy_rate: float
    total_units: int
    occupied_units: int
    new_customers: int
    churned_customers: int
    average_rental_duration: Optional[float] = None
    revenue_by_size: Dict[str, float] = {}
    occupancy_by_size: Dict[str, float] = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
