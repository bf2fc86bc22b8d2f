from datetime import datetime as _datetime, timezone as _timezone

UTC = _timezone.utc
UNIX_EPOCH = _datetime(1970, 1, 1, tzinfo=UTC)

Millis = int  # milliseconds since the UNIX epoch
Offset = int  # seconds east of UTC

MS_PER_SECOND = 1_000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

# The range of the standard library's datetime, expressed in UTC.
EPOCH_MS_MIN = -62135596800 * MS_PER_SECOND
EPOCH_MS_MAX = 253402300799 * MS_PER_SECOND + 999


def check_int(value: object, what: str) -> int:
    # bool is an int subclass, but never a meaningful instant or field
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{what} must be an integer, got {value!r}")
    return value
