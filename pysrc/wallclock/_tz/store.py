"""Timezone database access.

Lookup and caching are left to :mod:`zoneinfo`, which searches its
``TZPATH`` first, then the ``tzdata`` package. Keys are validated here
first, so that every failure surfaces as a ``ZoneResolutionError``.
"""

from __future__ import annotations

import logging
import zoneinfo
from datetime import timedelta as _timedelta
from typing import Iterable, NewType, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .._common import UNIX_EPOCH, Millis, Offset
from .common import ZoneResolutionError

__all__ = [
    "ZoneInfoResolver",
    "get_tz",
    "validate_tzid",
    "clear_tz_cache",
    "available_tz_keys",
]

_log = logging.getLogger(__name__)

# Alias for a TZ key that has been confirmed not to be a path traversal
# or contain other "bad" characters.
SafeTzId = NewType("SafeTzId", str)


def validate_tzid(key: str) -> SafeTzId:
    """Checks for invalid characters and path traversal in the key."""
    if not isinstance(key, str):
        raise TypeError(f"time zone key must be a string, got {key!r}")
    if (
        key.isascii()
        # IANA keys are short. Anything longer is a mistake or abuse.
        and 0 < len(key) < 100
        and all(c.isalnum() or c in "-_+/." for c in key)
        and ".." not in key
        and "//" not in key
        and "/./" not in key
        and key[0] not in ".-+/"
        and key[-1] != "/"
    ):
        return SafeTzId(key)
    raise ZoneResolutionError.for_key(key)


def get_tz(key: str) -> ZoneInfo:
    """Load a zone by key. Repeated lookups return the same cached object."""
    safe_key = validate_tzid(key)
    try:
        return ZoneInfo(safe_key)
    # Missing files, directories and non-TZif files all mean "no such key"
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise ZoneResolutionError.for_key(key) from None


def clear_tz_cache(only_keys: Optional[Iterable[str]] = None) -> None:
    if only_keys is None:
        _log.debug("clearing the time zone cache")
        ZoneInfo.clear_cache()
    else:
        keys = tuple(only_keys)
        _log.debug("clearing the time zone cache for %r", keys)
        ZoneInfo.clear_cache(only_keys=keys)


def available_tz_keys() -> set[str]:
    return zoneinfo.available_timezones()


class ZoneInfoResolver:
    """Resolves offsets using the IANA time zone database.

    TZif files are found the way :mod:`zoneinfo` finds them: on
    :data:`zoneinfo.TZPATH` (set by ``PYTHONTZPATH``) first, then in the
    ``tzdata`` package.
    """

    __slots__ = ()

    def resolve_offset(self, instant: Millis, zone: str, /) -> Offset:
        tz = get_tz(zone)
        try:
            local = (UNIX_EPOCH + _timedelta(milliseconds=instant)).astimezone(
                tz
            )
        except (OverflowError, ValueError):
            raise ZoneResolutionError.out_of_range(instant, zone) from None
        # NOTE: mypy doesn't know utcoffset() can never return None here
        return int(local.utcoffset().total_seconds())  # type: ignore[union-attr]

    def __repr__(self) -> str:
        return "ZoneInfoResolver()"
