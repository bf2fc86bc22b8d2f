from __future__ import annotations

from ._pywallclock import *
from ._pywallclock import (  # for the docs
    __all__ as _core_all,
    __version__,
    _patch_time_frozen,
    _patch_time_keep_ticking,
    _now_millis,
    _unpatch_time,
    _unpkl_datetime,
)

from contextlib import contextmanager as _contextmanager
from dataclasses import dataclass as _dataclass
from typing import Iterable as _Iterable, Iterator as _Iterator

from ._common import MS_PER_HOUR, MS_PER_MINUTE, MS_PER_SECOND
from ._defaults import Defaults, defaults
from ._tz import OffsetResolver, RuleTable, RuleTableResolver, ZoneInfoResolver
from ._tz.store import (
    available_tz_keys as _available_tz_keys,
    clear_tz_cache as _clear_tz_cache,
)

__all__ = [
    *_core_all,
    # Default context
    "Defaults",
    "defaults",
    # Offset resolvers
    "OffsetResolver",
    "ZoneInfoResolver",
    "RuleTable",
    "RuleTableResolver",
    # tz database
    "clear_tzcache",
    "available_timezones",
    # testing
    "patch_current_time",
]


@_dataclass
class _TimePatch:
    _pin: "DateTime | int"
    _keep_ticking: bool

    def shift(
        self,
        *,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
    ) -> None:
        delta = (
            hours * MS_PER_HOUR
            + minutes * MS_PER_MINUTE
            + seconds * MS_PER_SECOND
            + milliseconds
        )
        if self._keep_ticking:
            self._pin = new = _now_millis() + delta
            _patch_time_keep_ticking(new)
        else:
            self._pin = new = _instant_of(self._pin) + delta
            _patch_time_frozen(new)


def _instant_of(pin: "DateTime | int") -> int:
    return pin.instant if isinstance(pin, DateTime) else pin


@_contextmanager
def patch_current_time(
    dt: "DateTime | int",
    /,
    *,
    keep_ticking: bool,
) -> _Iterator[_TimePatch]:
    """Patch the current time to a fixed value (for testing purposes).
    Behaves as a context manager or decorator, with similar semantics to
    ``unittest.mock.patch``.

    Important
    ---------

    * This function should be used only for testing purposes. It is not
      thread-safe or part of the stable API.
    * This function only affects ``DateTime.now()``. It does not
      affect the standard library's time functions or any other libraries.
      Use the ``time_machine`` package if you also want to patch other libraries.
    * It doesn't affect the default timezone.
      Set ``wallclock.defaults.timezone`` for that.

    Example
    -------

    >>> from wallclock import DateTime, patch_current_time
    >>> d = DateTime.parse("1980-03-02 02:00", "UTC")
    >>> with patch_current_time(d, keep_ticking=False) as p:
    ...     assert DateTime.now() == d
    ...     p.shift(hours=4)
    ...     assert DateTime.now("UTC").hour == 6
    ...
    >>> assert DateTime.now() != d
    """
    instant = _instant_of(dt)
    if keep_ticking:
        _patch_time_keep_ticking(instant)
    else:
        _patch_time_frozen(instant)

    try:
        yield _TimePatch(dt, keep_ticking)
    finally:
        _unpatch_time()


def clear_tzcache(*, only_keys: _Iterable[str] | None = None) -> None:
    """Clear the timezone cache. If ``only_keys`` is provided, only the cache
    for those keys will be cleared.

    Existing ``DateTime`` instances aren't affected: they only hold a zone key,
    and will load the zone again on their next field access.

    The cache is the one of :class:`zoneinfo.ZoneInfo`, so this is the same as
    calling :meth:`zoneinfo.ZoneInfo.clear_cache`.
    """
    _clear_tz_cache(only_keys)


def available_timezones() -> set[str]:
    """The keys of all timezones :class:`ZoneInfoResolver` can load.

    To search other directories, set ``PYTHONTZPATH`` or call
    :func:`zoneinfo.reset_tzpath`.

    Warning
    -------
    This function may open a large number of files, since the first few bytes
    of timezone files must be read to determine if they are valid.
    """
    return _available_tz_keys()
