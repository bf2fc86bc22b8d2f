import os
from contextlib import contextmanager
from datetime import datetime, timezone
from unittest.mock import patch

from wallclock import Defaults, RuleTable, RuleTableResolver, defaults

HOUR_SECS = 3600
HOUR_MS = HOUR_SECS * 1000


def mk_millis(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    millisecond: int = 0,
) -> int:
    """Epoch milliseconds of a UTC reading (with a 1-based month)"""
    dt = datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
    return int(dt.timestamp()) * 1000 + millisecond


# A synthetic zone at -03:00, which springs forward to -02:00 on
# 2021-03-14 at 02:00 local time, and falls back on 2021-11-07 at
# 02:00 local time.
SHIFTY = "Test/Shifty"
SHIFTY_SPRING = mk_millis(2021, 3, 14, 5)
SHIFTY_FALL = mk_millis(2021, 11, 7, 4)
FIXED_PLUS_5_30 = "Test/Plus0530"

SYNTHETIC = RuleTableResolver(
    {
        SHIFTY: RuleTable(
            -3 * HOUR_SECS,
            [
                (SHIFTY_SPRING, -2 * HOUR_SECS),
                (SHIFTY_FALL, -3 * HOUR_SECS),
            ],
        ),
        FIXED_PLUS_5_30: RuleTable.fixed(5 * HOUR_SECS + 30 * 60),
        "UTC": RuleTable.fixed(0),
    }
)


class AlwaysEqual:
    def __eq__(self, _):
        return True


class NeverEqual:
    def __eq__(self, _):
        return False


@contextmanager
def default_tz(name: str):
    """Temporarily change the default timezone"""
    prev = defaults.timezone
    defaults.timezone = name
    try:
        yield
    finally:
        defaults.timezone = prev  # don't forget to reset after the patch!


@contextmanager
def environ(**variables: str):
    """Patch the environment, removing the locale variables that aren't given"""
    with patch.dict(os.environ, variables):
        for var in ("TZ", "LC_ALL", "LC_TIME", "LANG"):
            if var not in variables:
                os.environ.pop(var, None)
        yield


def synthetic_defaults(timezone: str = SHIFTY) -> Defaults:
    return Defaults(timezone, "en-GB", SYNTHETIC)
