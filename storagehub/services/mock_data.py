"""
Mock Data Generator
Builds a realistic, reproducible facility: units per size configuration,
a customer base with churn, and two years of monthly history.

The generator draws from its own seeded `random.Random`, so the same
(seed, as_of) pair always yields the same dataset.
"""
import logging
import random
from datetime import date
from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from storagehub.core.constants import (
    TARGET_OCCUPANCY_RATES,
    UNIT_SIZES,
    CustomerType,
)
from storagehub.models import Customer, MonthlyMetric, Unit
from storagehub.schemas.records import CustomerRecord, MonthlyMetricRecord, UnitRecord
from storagehub.services.forecast import seasonal_index

logger = logging.getLogger(__name__)

TOTAL_CUSTOMERS = 85
ACTIVE_CUSTOMER_PROBABILITY = 0.88
BUSINESS_CUSTOMER_PROBABILITY = 0.35
HISTORY_MONTHS = 24
BASE_OCCUPANCY_MIN = 82.0
BASE_OCCUPANCY_RANGE = 8.0
MAX_OCCUPANCY_CAP = 95.0
NEW_CUSTOMERS_RANGE = (5, 15)
CHURNED_CUSTOMERS_RANGE = (2, 8)
PRICE_VARIATION = 20


class MockDataset(BaseModel):
    units: List[UnitRecord]
    customers: List[CustomerRecord]
    metrics: List[MonthlyMetricRecord]


def shift_months(d: date, months: int) -> date:
    """Move `d` by whole months; the day is clamped to 28."""
    total = d.year * 12 + (d.month - 1) + months
    return date(total // 12, total % 12 + 1, min(d.day, 28))


def _random_date_between(rng: random.Random, start: date, end: date) -> date:
    if end <= start:
        return start
    return date.fromordinal(rng.randint(start.toordinal(), end.toordinal()))


def _generate_customers(rng: random.Random, as_of: date) -> List[dict]:
    customers = []
    for i in range(1, TOTAL_CUSTOMERS + 1):
        is_active = rng.random() < ACTIVE_CUSTOMER_PROBABILITY
        is_business = rng.random() < BUSINESS_CUSTOMER_PROBABILITY
        start_date = shift_months(as_of, -rng.randint(1, HISTORY_MONTHS))
        end_date = None
        if not is_active:
            end_date = min(shift_months(start_date, rng.randint(1, 12)), as_of)
        customers.append({
            "id": f"C{i:03d}",
            "name": f"Firma {i}" if is_business else f"Kunde {i}",
            "type": CustomerType.BUSINESS if is_business else CustomerType.PRIVATE,
            "start_date": start_date,
            "end_date": end_date,
            "unit_ids": [],
        })
    return customers


def _generate_units(rng: random.Random, customers: List[dict], as_of: date) -> List[dict]:
    active = [c for c in customers if c["end_date"] is None]
    units = []
    unit_number = 1
    for size, config in UNIT_SIZES.items():
        for _ in range(config.count):
            price = round(config.base_price + (rng.random() - 0.5) * PRICE_VARIATION)
            is_occupied = bool(active) and rng.random() < TARGET_OCCUPANCY_RATES[size]
            unit = {
                "id": f"U{unit_number:03d}",
                "size": size,
                "price_per_month": float(price),
                "is_occupied": is_occupied,
                "customer_id": None,
                "rented_since": None,
            }
            if is_occupied:
                customer = rng.choice(active)
                unit["customer_id"] = customer["id"]
                unit["rented_since"] = _random_date_between(rng, customer["start_date"], as_of)
                customer["unit_ids"].append(unit["id"])
            units.append(unit)
            unit_number += 1
    return units


def _generate_history(rng: random.Random, units: List[dict], as_of: date) -> List[MonthlyMetricRecord]:
    total_units = len(units)
    avg_price = sum(u["price_per_month"] for u in units) / total_units if total_units else 0.0

    history = []
    for offset in range(HISTORY_MONTHS - 1, -1, -1):
        month = shift_months(as_of, -offset)
        position = HISTORY_MONTHS - 1 - offset
        occupancy = min(
            MAX_OCCUPANCY_CAP,
            BASE_OCCUPANCY_MIN + rng.random() * BASE_OCCUPANCY_RANGE,
        )
        occupied = round(total_units * occupancy / 100)
        growth = 1 + 0.01 * position
        revenue = occupied * avg_price * seasonal_index(month.month - 1) * growth
        history.append(
            MonthlyMetricRecord(
                year=month.year,
                month_index=month.month - 1,
                revenue=round(revenue),
                occupancy_rate=round(occupancy, 1),
                total_units=total_units,
                occupied_units=occupied,
                new_customers=rng.randint(*NEW_CUSTOMERS_RANGE),
                churned_customers=rng.randint(*CHURNED_CUSTOMERS_RANGE),
            )
        )
    return history


def generate_mock_data(seed: int = 42, as_of: Optional[date] = None) -> MockDataset:
    """Generate a full dataset as of `as_of` (default: today)."""
    as_of = as_of or date.today()
    rng = random.Random(seed)

    customers = _generate_customers(rng, as_of)
    units = _generate_units(rng, customers, as_of)
    history = _generate_history(rng, units, as_of)

    return MockDataset(
        units=[UnitRecord(**u) for u in units],
        customers=[CustomerRecord(**c) for c in customers],
        metrics=history,
    )


def seed_database(db: Session, seed: int = 42, as_of: Optional[date] = None) -> bool:
    """
    Insert a mock dataset when the database holds no units yet.
    Returns True if rows were inserted.
    """
    if db.query(Unit).first() is not None:
        logger.info("[MockData] Units already present, skipping seed")
        return False

    dataset = generate_mock_data(seed=seed, as_of=as_of)

    for c in dataset.customers:
        db.add(Customer(
            id=c.id,
            name=c.name,
            type=c.type,
            start_date=c.start_date,
            end_date=c.end_date,
        ))
    # Flush customers first so unit foreign keys resolve
    db.flush()

    for u in dataset.units:
        db.add(Unit(
            id=u.id,
            size=u.size,
            price_per_month=u.price_per_month,
            is_occupied=u.is_occupied,
            customer_id=u.customer_id,
            rented_since=u.rented_since,
        ))

    for m in dataset.metrics:
        db.add(MonthlyMetric(
            month=m.month_key,
            total_revenue=m.revenue,
            occupancy_rate=m.occupancy_rate,
            total_units=m.total_units,
            occupied_units=m.occupied_units,
            new_customers=m.new_customers,
            churned_customers=m.churned_customers,
        ))

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.warning(f"[MockData] Seed insert failed: {e}")
        return False

    logger.info(
        f"[MockData] Seeded {len(dataset.units)} units, "
        f"{len(dataset.customers)} customers, {len(dataset.metrics)} months"
    )
    return True
