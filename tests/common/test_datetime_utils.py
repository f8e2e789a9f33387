from datetime import date

import pytest

from src.leavedesk.leavedesk.common.datetime_utils import (
    inclusive_days,
    iter_days,
    month_bounds,
    parse_date_field,
    round_half_up,
    sunday_based_weekday,
)
from src.leavedesk.leavedesk.common.geo import distance_meters
from src.leavedesk.leavedesk.core.exceptions import ValidationError


def test_month_bounds_handles_leap_february():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    with pytest.raises(ValidationError):
        month_bounds(2024, 13)


def test_iter_days_is_inclusive_and_empty_when_reversed():
    days = list(iter_days(date(2025, 1, 30), date(2025, 2, 2)))
    assert days[0] == date(2025, 1, 30) and days[-1] == date(2025, 2, 2)
    assert len(days) == inclusive_days(date(2025, 1, 30), date(2025, 2, 2)) == 4
    assert list(iter_days(date(2025, 1, 2), date(2025, 1, 1))) == []


def test_sunday_based_weekday():
    assert sunday_based_weekday(date(2025, 6, 1)) == 0  # Sunday
    assert sunday_based_weekday(date(2025, 6, 2)) == 1  # Monday
    assert sunday_based_weekday(date(2025, 6, 7)) == 6  # Saturday


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.25, 1) == 0.3


def test_parse_date_field_reports_the_field():
    assert parse_date_field("2025-03-04", "startDate") == date(2025, 3, 4)
    with pytest.raises(ValidationError, match="startDate"):
        parse_date_field("04/03/2025", "startDate")


def test_haversine_distance():
    assert distance_meters(12.9716, 77.5946, 12.9716, 77.5946) == 0
    # One thousandth of a degree of latitude is about 111 m.
    assert 110 < distance_meters(12.9716, 77.5946, 12.9726, 77.5946) < 112
