from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime
from typing import Optional

from storagehub.core.constants import UnitSize


class UnitFields(BaseModel):
    size: UnitSize
    price_per_month: float = Field(gt=0)
    is_occupied: bool = False
    customer_id: Optional[str] = None
    rented_since: Optional[date] = None
    floor: Optional[int] = 1
    notes: Optional[str] = None


class UnitBase(UnitFields):
    @model_validator(mode="after")
    def check_renter(self):
        if self.customer_id and not self.is_occupied:
            raise ValueError("customer_id can only be set on an occupied unit")
        if self.rented_since and not self.is_occupied:
            raise ValueError("rented_since can only be set on an occupied unit")
        return self


class UnitCreate(UnitBase):
    id: str = Field(min_length=1, max_length=10)


class UnitUpdate(BaseModel):
    size: Optional[UnitSize] = None
    price_per_month: Optional[float] = Field(default=None, gt=0)
    is_occupied: Optional[bool] = None
    customer_id: Optional[str] = None
    rented_since: Optional[date] = None
    floor: Optional[int] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_required_not_null(self):
        for field in ("size", "price_per_month", "is_occupied"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class UnitResponse(UnitFields):
    id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
