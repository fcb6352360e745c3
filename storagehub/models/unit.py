"""
Storage Unit Model
"""
from datetime import date
from typing import Optional

from sqlalchemy import Boolean, Date, Enum as SQLEnum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storagehub.core.constants import UnitSize
from storagehub.db.base import Base, TimestampMixin


class Unit(Base, TimestampMixin):
    __tablename__ = "units"

    id: Mapped[str] = mapped_column(String(10), primary_key=True)
    size: Mapped[UnitSize] = mapped_column(SQLEnum(UnitSize), nullable=False, index=True)
    price_per_month: Mapped[float] = mapped_column(Float, nullable=False)
    is_occupied: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    customer_id: Mapped[Optional[str]] = mapped_column(
        String(10), ForeignKey("customers.id"), nullable=True, index=True
    )
    rented_since: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    floor: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=1)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    customer = relationship("Customer", back_populates="units")
