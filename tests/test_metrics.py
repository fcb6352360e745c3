import pytest

from storagehub.core.constants import OccupancyThresholds
from storagehub.services.metrics import (
    average,
    compare_to_average,
    net_growth,
    occupancy_rate,
    occupancy_status,
    percentage_change,
    revenue_per_sqm,
    turnover_rate,
)


def test_occupancy_rate():
    assert occupancy_rate(37, 40) == 92.5
    assert occupancy_rate(1, 3) == pytest.approx(33.3333, rel=1e-4)


def test_occupancy_rate_zero_total_is_zero():
    assert occupancy_rate(0, 0) == 0
    assert occupancy_rate(5, 0) == 0


def test_revenue_per_sqm():
    assert revenue_per_sqm(1000, 200) == 5
    assert revenue_per_sqm(1000, 0) == 0


def test_percentage_change():
    assert percentage_change(110, 100) == pytest.approx(10)
    assert percentage_change(90, 100) == pytest.approx(-10)
    assert percentage_change(0, 100) == pytest.approx(-100)


@pytest.mark.parametrize("current, expected", [(50, 100), (0.01, 100), (0, 0), (-5, 0)])
def test_percentage_change_from_zero(current, expected):
    assert percentage_change(current, 0) == expected


def test_average():
    assert average([]) == 0
    assert average([10, 20, 30]) == 20
    assert average(x for x in (1, 2)) == 1.5


def test_turnover_rate():
    assert turnover_rate(5, 3, 80) == 10
    assert turnover_rate(5, 3, 0) == 0


def test_net_growth():
    assert net_growth(12, 4) == 8
    assert net_growth(5, 8) == -3


def test_compare_to_average():
    assert compare_to_average(11, 10) == "above"
    assert compare_to_average(9, 10) == "below"
    assert compare_to_average(10, 10) == "equal"


def test_occupancy_status_bands_are_inclusive_below():
    assert occupancy_status(85) == "high"
    assert occupancy_status(84.999) == "medium"
    assert occupancy_status(70) == "medium"
    assert occupancy_status(69.9) == "low"


def test_occupancy_status_custom_thresholds():
    thresholds = OccupancyThresholds(high=95, medium=80)
    assert occupancy_status(90, thresholds) == "medium"
    assert occupancy_status(95, thresholds) == "high"
    assert occupancy_status(79, thresholds) == "low"
