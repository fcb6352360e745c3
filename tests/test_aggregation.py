from datetime import date

import pytest

from conftest import make_customer, make_month, make_unit
from storagehub.core.constants import CustomerType, UnitSize
from storagehub.services.aggregation import (
    build_monthly_snapshot,
    compare_unit_revenue_to_average,
    customer_segments,
    customer_trend,
    customer_type_label,
    dashboard_summary,
    least_profitable_size,
    months_between,
    most_profitable_size,
    top_customers,
    trend_label,
    unit_size_metrics,
    unit_turnover_rate,
    year_over_year,
)

AS_OF = date(2025, 5, 20)


@pytest.fixture()
def customers():
    return [
        make_customer("C1", start=date(2024, 5, 1)),
        make_customer("C2", type=CustomerType.BUSINESS, start=date(2025, 1, 1)),
        make_customer("C3", start=date(2024, 1, 1), end=date(2024, 7, 1)),
    ]


@pytest.fixture()
def units():
    return [
        make_unit("U1", size=UnitSize.SIZE_10, price=100, customer_id="C1", rented_since=date(2024, 11, 1)),
        make_unit("U2", size=UnitSize.SIZE_20, price=200, customer_id="C2", rented_since=date(2025, 1, 1)),
        make_unit("U3", size=UnitSize.SIZE_10, price=80),
        make_unit("U4", size=UnitSize.SIZE_20, price=180),
    ]


def test_months_between():
    assert months_between(date(2024, 11, 30), date(2025, 5, 1)) == 6
    assert months_between(date(2025, 5, 1), date(2025, 5, 31)) == 0
    assert months_between(date(2025, 6, 1), date(2025, 5, 1)) == 0


def test_unit_size_metrics(units):
    metrics = unit_size_metrics(units)

    assert [m.size for m in metrics] == [UnitSize.SIZE_10, UnitSize.SIZE_20]
    ten = metrics[0]
    assert ten.total_units == 2
    assert ten.occupied_units == 1
    assert ten.available_units == 1
    assert ten.occupancy_rate == 50.0
    assert ten.avg_price == 90.0
    assert ten.total_revenue == 100
    assert ten.revenue_per_sqm == 5.0    # 100 / (2 * 10m²)


def test_unit_size_metrics_empty():
    assert unit_size_metrics([]) == []


def test_profitable_sizes(units):
    metrics = unit_size_metrics(units)
    # 20m²: 200 / 40m² = 5.0 ; 10m²: 100 / 20m² = 5.0 -> tie keeps the first
    assert most_profitable_size(metrics).size == UnitSize.SIZE_10
    assert least_profitable_size(metrics).size == UnitSize.SIZE_10

    units = units + [make_unit("U5", size=UnitSize.SIZE_20, price=300, customer_id="C2")]
    metrics = unit_size_metrics(units)
    assert most_profitable_size(metrics).size == UnitSize.SIZE_20
    assert least_profitable_size(metrics).size == UnitSize.SIZE_10


def test_profitable_sizes_empty():
    assert most_profitable_size([]) is None
    assert least_profitable_size([]) is None


def test_compare_unit_revenue_to_average(units):
    metrics = unit_size_metrics(units)
    assert compare_unit_revenue_to_average(6.0, metrics) == "above"
    assert compare_unit_revenue_to_average(5.0, metrics) == "equal"
    assert trend_label("above") == "Über Ø"
    assert trend_label("below") == "Unter Ø"


def test_unit_turnover_rate():
    history = [
        make_month(2025, 3, 1000, new_customers=1, churned_customers=1, occupied_units=10),
        make_month(2025, 4, 1000, new_customers=6, churned_customers=2, occupied_units=80),
    ]
    assert unit_turnover_rate(history) == 10
    assert unit_turnover_rate([]) == 0


def test_customer_segments(customers, units):
    segments = customer_segments(customers, units)

    private, business = segments
    assert private.type == CustomerType.PRIVATE
    assert private.count == 2
    assert private.percentage == 66.7
    assert private.total_revenue == 100
    assert business.count == 1
    assert business.percentage == 33.3
    assert business.total_revenue == 200
    assert customer_type_label(business.type) == "Geschäft"


def test_customer_segments_skip_empty_types(units):
    segments = customer_segments([make_customer("C1")], units)
    assert [s.type for s in segments] == [CustomerType.PRIVATE]
    assert segments[0].percentage == 100.0


def test_top_customers(customers, units):
    top = top_customers(customers, units)

    assert [c.id for c in top] == ["C2", "C1"]
    assert top[0].monthly_revenue == 200
    assert top[0].units_count == 1
    assert top_customers(customers, units, limit=1)[0].id == "C2"


def test_top_customers_ties_keep_input_order():
    customers = [make_customer("C1"), make_customer("C2"), make_customer("C3")]
    units = [
        make_unit("U1", price=100, customer_id="C1"),
        make_unit("U2", price=100, customer_id="C2"),
        make_unit("U3", price=150, customer_id="C3"),
    ]
    assert [c.id for c in top_customers(customers, units)] == ["C3", "C1", "C2"]


def test_customer_trend():
    history = [
        make_month(2025, 0, 1000, new_customers=10, churned_customers=4),
        make_month(2025, 1, 1000, new_customers=3, churned_customers=7),
    ]
    trend = customer_trend(history)
    assert [p.month for p in trend] == ["Jan", "Feb"]
    assert [p.net_growth for p in trend] == [6, -4]


def test_dashboard_summary(customers, units):
    history = [
        make_month(2024, 4, 1000),
        make_month(2025, 3, 1800),
        make_month(2025, 4, 2000, occupancy_rate=50.0),
    ]
    summary = dashboard_summary(history, customers, units, AS_OF)

    assert summary.total_occupancy_rate == 50.0
    assert summary.monthly_revenue == 2000
    assert summary.revenue_change_percent == 11.1
    assert summary.revenue_change_vs_last_year == 100.0
    assert summary.avg_rental_duration == 5.0
    assert summary.total_units == 4
    assert summary.occupied_units == 2
    assert summary.available_units == 2
    assert summary.total_customers == 3
    assert summary.churn_rate == 33.3
    # 150 average revenue of active customers * (12 + 4 + 6) / 3 months
    assert summary.avg_customer_lifetime_value == 1100.0


def test_dashboard_summary_without_data():
    summary = dashboard_summary([], [], [], AS_OF)

    assert summary.monthly_revenue == 0
    assert summary.revenue_change_percent == 0
    assert summary.revenue_change_vs_last_year == 0
    assert summary.churn_rate == 0
    assert summary.avg_customer_lifetime_value == 0
    assert summary.total_units == 0


def test_dashboard_summary_single_month_has_no_change(customers, units):
    summary = dashboard_summary([make_month(2025, 4, 2000)], customers, units, AS_OF)
    assert summary.revenue_change_percent == 0
    assert summary.revenue_change_vs_last_year == 0


def test_year_over_year():
    history = [
        make_month(2024, 0, 1000),
        make_month(2024, 1, 1000),
        make_month(2025, 0, 1100),
        make_month(2025, 2, 500),
    ]
    series = year_over_year(history)

    assert series.current_year == 2025
    assert series.previous_year == 2024
    assert [m.month for m in series.months] == ["Jan", "Feb", "Mär"]
    # A month missing on one side counts as 0, so the difference is -100 or +100
    assert [m.difference for m in series.months] == [10.0, -100.0, 100.0]
    assert series.months[1].current_year == 0
    assert series.months[2].previous_year == 0
    assert series.current_year_total == 1600
    assert series.previous_year_total == 2000
    assert series.overall_growth == -20.0


def test_year_over_year_explicit_year():
    history = [make_month(2023, 5, 400), make_month(2024, 5, 500), make_month(2025, 5, 900)]
    series = year_over_year(history, current_year=2024)

    assert series.previous_year == 2023
    assert len(series.months) == 1
    assert series.months[0].difference == 25.0


def test_year_over_year_without_prior_year():
    series = year_over_year([make_month(2025, 0, 1000)])
    assert series.previous_year_total == 0
    assert series.overall_growth == 0


def test_build_monthly_snapshot(customers, units):
    customers = customers + [make_customer("C4", start=date(2025, 5, 2))]
    snapshot = build_monthly_snapshot(units, customers, AS_OF)

    assert snapshot.month_key == "2025-05"
    assert snapshot.revenue == 300
    assert snapshot.occupancy_rate == 50.0
    assert snapshot.total_units == 4
    assert snapshot.occupied_units == 2
    assert snapshot.new_customers == 1
    assert snapshot.churned_customers == 0
