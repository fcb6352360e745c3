"""
Aggregation Layer
Joins units, customers and monthly history in memory and derives the
rollups shown on the dashboard.

All functions are pure: inputs are never mutated and identical inputs give
identical outputs. Monthly history is expected oldest to newest.
"""
from datetime import date
from typing import Dict, List, Optional, Sequence

from storagehub.core.constants import (
    TOP_CUSTOMERS_LIMIT,
    CustomerType,
    Labels,
    UnitSize,
)
from storagehub.schemas.analytics import (
    CustomerSegment,
    CustomerTrendPoint,
    DashboardSummary,
    TopCustomer,
    UnitSizeMetrics,
    YearOverYearPoint,
    YearOverYearSeries,
)
from storagehub.schemas.records import (
    CustomerRecord,
    MonthlyMetricRecord,
    UnitRecord,
)
from storagehub.services.metrics import (
    average,
    compare_to_average,
    net_growth,
    occupancy_rate,
    percentage_change,
    revenue_per_sqm,
    turnover_rate,
)


# ── Helpers ────────────────────────────────────────────────────────────────

def months_between(start: date, end: date) -> int:
    """Whole calendar months from `start` to `end`, never negative."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    return max(0, months)


def _units_by_customer(units: Sequence[UnitRecord]) -> Dict[str, List[UnitRecord]]:
    by_customer: Dict[str, List[UnitRecord]] = {}
    for unit in units:
        if unit.customer_id:
            by_customer.setdefault(unit.customer_id, []).append(unit)
    return by_customer


# ── Unit analytics ─────────────────────────────────────────────────────────

def unit_size_metrics(units: Sequence[UnitRecord]) -> List[UnitSizeMetrics]:
    """Per-size occupancy and revenue rollup, in size order."""
    grouped: Dict[UnitSize, List[UnitRecord]] = {}
    for unit in units:
        grouped.setdefault(unit.size, []).append(unit)

    result = []
    for size in UnitSize:
        group = grouped.get(size)
        if not group:
            continue
        total = len(group)
        occupied = [u for u in group if u.is_occupied]
        total_revenue = sum(u.price_per_month for u in occupied)
        result.append(
            UnitSizeMetrics(
                size=size,
                total_units=total,
                occupied_units=len(occupied),
                available_units=total - len(occupied),
                occupancy_rate=round(occupancy_rate(len(occupied), total), 1),
                avg_price=round(average(u.price_per_month for u in group), 2),
                revenue_per_sqm=round(revenue_per_sqm(total_revenue, total * size.sqm), 2),
                total_revenue=round(total_revenue, 2),
            )
        )
    return result


def most_profitable_size(unit_size_data: Sequence[UnitSizeMetrics]) -> Optional[UnitSizeMetrics]:
    if not unit_size_data:
        return None
    return max(unit_size_data, key=lambda m: m.revenue_per_sqm)


def least_profitable_size(unit_size_data: Sequence[UnitSizeMetrics]) -> Optional[UnitSizeMetrics]:
    if not unit_size_data:
        return None
    return min(unit_size_data, key=lambda m: m.revenue_per_sqm)


def unit_turnover_rate(metrics: Sequence[MonthlyMetricRecord]) -> float:
    """Turnover rate of the most recent month, 0 without history."""
    if not metrics:
        return 0.0
    last = metrics[-1]
    return turnover_rate(last.new_customers, last.churned_customers, last.occupied_units)


def compare_unit_revenue_to_average(
    value: float, unit_size_data: Sequence[UnitSizeMetrics]
) -> str:
    avg = average(m.revenue_per_sqm for m in unit_size_data)
    return compare_to_average(value, avg)


def trend_label(comparison: str) -> str:
    if comparison == "above":
        return Labels.TREND_ABOVE_AVERAGE
    return Labels.TREND_BELOW_AVERAGE


# ── Customer analytics ─────────────────────────────────────────────────────

def customer_type_label(customer_type: CustomerType) -> str:
    return Labels.CUSTOMER_TYPE[CustomerType(customer_type)]


def customer_segments(
    customers: Sequence[CustomerRecord], units: Sequence[UnitRecord]
) -> List[CustomerSegment]:
    """Count, share and occupied-unit revenue per customer type."""
    units_by_customer = _units_by_customer(units)
    total_customers = len(customers)

    segments = []
    for customer_type in CustomerType:
        members = [c for c in customers if c.type == customer_type]
        if not members:
            continue
        revenue = sum(
            u.price_per_month
            for c in members
            for u in units_by_customer.get(c.id, [])
            if u.is_occupied
        )
        segments.append(
            CustomerSegment(
                type=customer_type,
                count=len(members),
                percentage=round(len(members) / total_customers * 100, 1),
                total_revenue=round(revenue, 2),
            )
        )
    return segments


def top_customers(
    customers: Sequence[CustomerRecord],
    units: Sequence[UnitRecord],
    limit: int = TOP_CUSTOMERS_LIMIT,
) -> List[TopCustomer]:
    """Active customers ranked by the monthly price of their units."""
    units_by_customer = _units_by_customer(units)

    ranked = []
    for customer in customers:
        if not customer.is_active:
            continue
        customer_units = units_by_customer.get(customer.id, [])
        ranked.append(
            TopCustomer(
                **customer.model_dump(),
                units_count=len(customer_units),
                monthly_revenue=sum(u.price_per_month for u in customer_units),
            )
        )
    # sorted() is stable, so ties keep their input order
    ranked = sorted(ranked, key=lambda c: c.monthly_revenue, reverse=True)
    return ranked[:limit]


def customer_trend(metrics: Sequence[MonthlyMetricRecord]) -> List[CustomerTrendPoint]:
    return [
        CustomerTrendPoint(
            month=m.label,
            year=m.year,
            new_customers=m.new_customers,
            churned_customers=m.churned_customers,
            net_growth=net_growth(m.new_customers, m.churned_customers),
        )
        for m in metrics
    ]


# ── Dashboard ──────────────────────────────────────────────────────────────

def _find_same_month_last_year(
    metrics: Sequence[MonthlyMetricRecord], latest: MonthlyMetricRecord
) -> Optional[MonthlyMetricRecord]:
    if latest.year is None:
        return None
    for metric in metrics:
        if metric.month_index == latest.month_index and metric.year == latest.year - 1:
            return metric
    return None


def dashboard_summary(
    metrics: Sequence[MonthlyMetricRecord],
    customers: Sequence[CustomerRecord],
    units: Sequence[UnitRecord],
    as_of: date,
) -> DashboardSummary:
    """
    Headline KPIs: the latest month's occupancy and revenue with their
    month-over-month and year-over-year deltas, plus lifetime customer and
    unit aggregates evaluated at `as_of`.
    """
    latest = metrics[-1] if metrics else None
    previous = metrics[-2] if len(metrics) > 1 else None

    revenue_change = 0.0
    revenue_change_yoy = 0.0
    if latest is not None:
        if previous is not None:
            revenue_change = percentage_change(latest.revenue, previous.revenue)
        last_year = _find_same_month_last_year(metrics, latest)
        if last_year is not None:
            revenue_change_yoy = percentage_change(latest.revenue, last_year.revenue)

    occupied = [u for u in units if u.is_occupied]
    rental_durations = [
        months_between(u.rented_since, as_of) for u in occupied if u.rented_since
    ]

    churned = [c for c in customers if c.end_date is not None]
    churn_rate = len(churned) / len(customers) * 100 if customers else 0.0

    units_by_customer = _units_by_customer(units)
    revenue_per_active = [
        sum(u.price_per_month for u in units_by_customer.get(c.id, []) if u.is_occupied)
        for c in customers
        if c.is_active
    ]
    tenures = [months_between(c.start_date, c.end_date or as_of) for c in customers]
    lifetime_value = average(revenue_per_active) * average(tenures)

    return DashboardSummary(
        total_occupancy_rate=latest.occupancy_rate if latest else 0.0,
        monthly_revenue=latest.revenue if latest else 0.0,
        revenue_change_percent=round(revenue_change, 1),
        revenue_change_vs_last_year=round(revenue_change_yoy, 1),
        avg_rental_duration=round(average(rental_durations), 1),
        total_units=len(units),
        occupied_units=len(occupied),
        available_units=len(units) - len(occupied),
        total_customers=len(customers),
        churn_rate=round(churn_rate, 1),
        avg_customer_lifetime_value=round(lifetime_value, 2),
    )


# ── Year over year ─────────────────────────────────────────────────────────

def year_over_year(
    metrics: Sequence[MonthlyMetricRecord], current_year: Optional[int] = None
) -> YearOverYearSeries:
    """
    Revenue per calendar month for `current_year` against the year before.

    `current_year` defaults to the latest tagged year in `metrics`. A month
    missing on one side counts as 0 on that side, so a month without
    current-year data shows -100% and one without prior-year data +100%.
    """
    tagged = [m for m in metrics if m.year is not None]
    if current_year is None:
        current_year = max((m.year for m in tagged), default=date.today().year)
    previous_year = current_year - 1

    slots: Dict[int, Dict[str, float]] = {}
    for metric in tagged:
        if metric.year == current_year:
            slots.setdefault(metric.month_index, {})["current"] = metric.revenue
        elif metric.year == previous_year:
            slots.setdefault(metric.month_index, {})["previous"] = metric.revenue

    months = []
    for month_index in sorted(slots):
        current = slots[month_index].get("current", 0.0)
        previous = slots[month_index].get("previous", 0.0)
        months.append(
            YearOverYearPoint(
                month=MonthlyMetricRecord(month_index=month_index).label,
                month_index=month_index,
                current_year=current,
                previous_year=previous,
                difference=round(percentage_change(current, previous), 1),
            )
        )

    current_total = sum(m.current_year for m in months)
    previous_total = sum(m.previous_year for m in months)
    overall_growth = (
        round(percentage_change(current_total, previous_total), 1)
        if previous_total > 0
        else 0.0
    )

    return YearOverYearSeries(
        current_year=current_year,
        previous_year=previous_year,
        months=months,
        current_year_total=current_total,
        previous_year_total=previous_total,
        overall_growth=overall_growth,
    )


# ── Monthly snapshot ───────────────────────────────────────────────────────

def build_monthly_snapshot(
    units: Sequence[UnitRecord],
    customers: Sequence[CustomerRecord],
    as_of: date,
) -> MonthlyMetricRecord:
    """Metrics for the calendar month containing `as_of`."""

    def in_month(d: Optional[date]) -> bool:
        return d is not None and d.year == as_of.year and d.month == as_of.month

    occupied = [u for u in units if u.is_occupied]
    return MonthlyMetricRecord(
        year=as_of.year,
        month_index=as_of.month - 1,
        revenue=round(sum(u.price_per_month for u in occupied), 2),
        occupancy_rate=round(occupancy_rate(len(occupied), len(units)), 2),
        total_units=len(units),
        occupied_units=len(occupied),
        new_customers=sum(1 for c in customers if in_month(c.start_date)),
        churned_customers=sum(1 for c in customers if in_month(c.end_date)),
    )
