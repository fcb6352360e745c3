"""
Domain Record Schemas
Read-only inputs to the analytics calculations: storage units, customers
and monthly metric snapshots.
"""
import logging
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from storagehub.core.constants import MONTH_NAMES, CustomerType, UnitSize

logger = logging.getLogger(__name__)


class UnitRecord(BaseModel):
    """A single rentable storage unit."""
    id: str
    size: UnitSize
    price_per_month: float = Field(gt=0)
    is_occupied: bool = False
    customer_id: Optional[str] = None
    rented_since: Optional[date] = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def coalesce_vacant_unit(cls, data):
        # A vacant unit has no renter; stale references are dropped.
        if isinstance(data, dict) and not data.get("is_occupied"):
            if data.get("customer_id") or data.get("rented_since"):
                logger.warning(
                    f"[UnitRecord] Unit {data.get('id')} is vacant but references "
                    f"customer {data.get('customer_id')}; dropping the reference"
                )
                data = {**data, "customer_id": None, "rented_since": None}
        return data


class CustomerRecord(BaseModel):
    """A private or business renter."""
    id: str
    name: str
    type: CustomerType
    start_date: date
    end_date: Optional[date] = None   # None = currently active
    unit_ids: List[str] = []

    model_config = {"frozen": True}

    @property
    def is_active(self) -> bool:
        return self.end_date is None


class MonthlyMetricRecord(BaseModel):
    """
    Historical snapshot for one calendar month.

    Keyed by (year, month_index) with month_index 0-11; the display label is
    only produced at the boundary via `label`. `year` may be missing for
    series that are not tagged with a calendar year.
    """
    year: Optional[int] = None
    month_index: int = Field(ge=0, le=11)
    revenue: float = 0.0
    occupancy_rate: float = Field(default=0.0, ge=0, le=100)
    total_units: int = 0
    occupied_units: int = 0
    new_customers: int = 0
    churned_customers: int = 0

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return MONTH_NAMES[self.month_index]

    @property
    def month_key(self) -> Optional[str]:
        """'YYYY-MM' key, or None for untagged months."""
        if self.year is None:
            return None
        return f"{self.year:04d}-{self.month_index + 1:02d}"

    @classmethod
    def parse_month_key(cls, month: str) -> tuple:
        """Split a 'YYYY-MM' key into (year, month_index)."""
        year_str, month_str = month.split("-", 1)
        month_index = int(month_str) - 1
        if not 0 <= month_index <= 11:
            raise ValueError(f"Invalid month key: {month}")
        return int(year_str), month_index
