"""Proleptic Gregorian calendar arithmetic on plain integers.

All functions accept out-of-range fields (e.g. month 13, day 0, hour -1)
and roll them over into the neighbouring unit, the same way adding raw
calendar units would.
"""

from ._common import (
    MS_PER_DAY,
    MS_PER_HOUR,
    MS_PER_MINUTE,
    MS_PER_SECOND,
    Millis,
)

# Days from 0000-03-01 to 1970-01-01
_DAYS_0000_03_01_TO_EPOCH = 719_468
_DAYS_PER_400Y = 146_097


# The 400-year cycle starts on March 1st so that the leap day is the last
# day of the (shifted) year. Floor division keeps this valid for years < 0.
def days_from_civil(year: int, month: int, day: int) -> int:
    """Days since 1970-01-01 of the given date. ``month`` is 1-12;
    ``day`` may be any integer."""
    year -= month <= 2
    era = year // 400
    year_of_era = year - era * 400
    day_of_year = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    day_of_era = (
        year_of_era * 365 + year_of_era // 4 - year_of_era // 100 + day_of_year
    )
    return era * _DAYS_PER_400Y + day_of_era - _DAYS_0000_03_01_TO_EPOCH


def civil_from_days(days: int) -> tuple[int, int, int]:
    """The (year, month 1-12, day) for the given days since 1970-01-01."""
    days += _DAYS_0000_03_01_TO_EPOCH
    era = days // _DAYS_PER_400Y
    day_of_era = days - era * _DAYS_PER_400Y
    year_of_era = (
        day_of_era
        - day_of_era // 1460
        + day_of_era // 36524
        - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (
        365 * year_of_era + year_of_era // 4 - year_of_era // 100
    )
    month_shifted = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * month_shifted + 2) // 5 + 1
    month = month_shifted + 3 if month_shifted < 10 else month_shifted - 9
    return year_of_era + era * 400 + (month <= 2), month, day


def epoch_millis_from_fields(
    year: int,
    month0: int,
    day: int,
    hour: int,
    minute: int,
    second: int,
    millisecond: int = 0,
) -> Millis:
    """Interpret the fields as a UTC reading and return epoch milliseconds.
    ``month0`` is 0-based."""
    year_carry, month0 = divmod(month0, 12)
    days = days_from_civil(year + year_carry, month0 + 1, 1) + day - 1
    return (
        days * MS_PER_DAY
        + hour * MS_PER_HOUR
        + minute * MS_PER_MINUTE
        + second * MS_PER_SECOND
        + millisecond
    )


def fields_from_epoch_millis(
    ms: Millis,
) -> tuple[int, int, int, int, int, int, int]:
    """Inverse of ``epoch_millis_from_fields`` for normalized fields.
    Returns (year, month0, day, hour, minute, second, millisecond)."""
    days, ms = divmod(ms, MS_PER_DAY)
    year, month, day = civil_from_days(days)
    hour, ms = divmod(ms, MS_PER_HOUR)
    minute, ms = divmod(ms, MS_PER_MINUTE)
    second, ms = divmod(ms, MS_PER_SECOND)
    return year, month - 1, day, hour, minute, second, ms
