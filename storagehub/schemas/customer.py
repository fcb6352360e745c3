from pydantic import BaseModel, EmailStr, Field, model_validator
from datetime import date, datetime
from typing import Optional, List

from storagehub.core.constants import CustomerType


class CustomerBase(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    type: CustomerType
    company_name: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CustomerCreate(CustomerBase):
    id: str = Field(min_length=1, max_length=10)


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    type: Optional[CustomerType] = None
    company_name: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_required_not_null(self):
        for field in ("name", "type", "start_date"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class CustomerResponse(CustomerBase):
    id: str
    unit_ids: List[str] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
