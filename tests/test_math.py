from datetime import date

import pytest
from hypothesis import given
from hypothesis.strategies import dates, integers

from wallclock._math import (
    civil_from_days,
    days_from_civil,
    epoch_millis_from_fields,
    fields_from_epoch_millis,
)

from .common import mk_millis

EPOCH_DATE = date(1970, 1, 1)


@pytest.mark.parametrize(
    "y, m, d, expect",
    [
        (1970, 1, 1, 0),
        (1970, 1, 2, 1),
        (1969, 12, 31, -1),
        (2000, 2, 29, 11016),
        (2000, 3, 1, 11017),
        (1900, 3, 1, -25508),
        (1, 1, 1, -719162),
        (9999, 12, 31, 2932896),
    ],
)
def test_days_from_civil(y, m, d, expect):
    assert days_from_civil(y, m, d) == expect
    assert civil_from_days(expect) == (y, m, d)


@given(dates())
def test_days_agree_with_stdlib(d):
    days = (d - EPOCH_DATE).days
    assert days_from_civil(d.year, d.month, d.day) == days
    assert civil_from_days(days) == (d.year, d.month, d.day)


def test_proleptic_before_year_one():
    # 1 BC (year 0) is a leap year in the proleptic Gregorian calendar
    assert civil_from_days(days_from_civil(0, 2, 29)) == (0, 2, 29)
    assert days_from_civil(1, 1, 1) - days_from_civil(0, 1, 1) == 366
    assert civil_from_days(days_from_civil(-1, 12, 31)) == (-1, 12, 31)


class TestEpochMillisFromFields:
    def test_epoch(self):
        assert epoch_millis_from_fields(1970, 0, 1, 0, 0, 0) == 0

    def test_typical(self):
        assert epoch_millis_from_fields(
            2025, 9, 1, 14, 30, 0, 250
        ) == mk_millis(2025, 10, 1, 14, 30, millisecond=250)

    @pytest.mark.parametrize(
        "fields, expect",
        [
            # month overflow into the next year
            ((2025, 12, 1, 0, 0, 0), (2026, 1, 1)),
            # negative month
            ((2025, -1, 1, 0, 0, 0), (2024, 12, 1)),
            # day 31 in a 30-day month
            ((2025, 3, 31, 0, 0, 0), (2025, 5, 1)),
            # day 0 is the last day of the previous month
            ((2024, 2, 0, 0, 0, 0), (2024, 2, 29)),
            # hour overflow
            ((2025, 0, 31, 25, 0, 0), (2025, 2, 1, 1)),
            # negative hour
            ((2025, 0, 1, -1, 0, 0), (2024, 12, 31, 23)),
            # seconds overflow into minutes and hours
            ((2025, 0, 1, 0, 59, 61), (2025, 1, 1, 1, 0, 1)),
        ],
    )
    def test_rollover(self, fields, expect):
        assert epoch_millis_from_fields(*fields) == mk_millis(*expect)


class TestFieldsFromEpochMillis:
    def test_epoch(self):
        assert fields_from_epoch_millis(0) == (1970, 0, 1, 0, 0, 0, 0)

    def test_before_epoch(self):
        assert fields_from_epoch_millis(-1) == (1969, 11, 31, 23, 59, 59, 999)

    @given(integers(-62135596800000, 253402300799999))
    def test_inverse(self, ms):
        assert epoch_millis_from_fields(*fields_from_epoch_millis(ms)) == ms

    def test_leap_day(self):
        ms = mk_millis(2024, 2, 29, 12, 1)
        assert fields_from_epoch_millis(ms) == (2024, 1, 29, 12, 1, 0, 0)
