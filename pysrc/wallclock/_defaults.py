"""The default timezone and locale, used when a constructor isn't given one."""

from __future__ import annotations

import logging
import os
from typing import Optional

from ._tz import OffsetResolver, ZoneInfoResolver
from ._tz.system import get_tz_key

__all__ = ["Defaults", "defaults"]

_log = logging.getLogger(__name__)

FALLBACK_TIMEZONE = "UTC"
FALLBACK_LOCALE = "en-US"


class Defaults:
    """Settings applied when a zone (or locale) is omitted.

    They are read at the moment of construction. Changing them afterwards
    doesn't affect existing values, only the ones created from then on.

    Note
    ----
    Change the attributes of :data:`wallclock.defaults`, or pass another
    instance with ``context=``. Assigning a new object to
    ``wallclock.defaults`` has no effect on the constructors.

    Example
    -------
    >>> from wallclock import DateTime, defaults
    >>> defaults.timezone = "Europe/Amsterdam"
    >>> DateTime.parse("2024-06-01 12:00").zone
    'Europe/Amsterdam'
    """

    __slots__ = ("timezone", "locale", "resolver")

    timezone: str
    # Only informative: it isn't used in any calculation
    locale: str
    resolver: OffsetResolver

    def __init__(
        self,
        timezone: str,
        locale: str = FALLBACK_LOCALE,
        resolver: Optional[OffsetResolver] = None,
    ):
        self.timezone = timezone
        self.locale = locale
        self.resolver = ZoneInfoResolver() if resolver is None else resolver

    @classmethod
    def from_environment(
        cls, resolver: Optional[OffsetResolver] = None
    ) -> Defaults:
        """Detect the defaults from the host system"""
        return cls(_detect_timezone(), _detect_locale(), resolver)

    def reset(self) -> None:
        """Re-detect the timezone and locale from the host system.
        The resolver is left as-is."""
        self.timezone = _detect_timezone()
        self.locale = _detect_locale()

    def __repr__(self) -> str:
        return (
            f"Defaults(timezone={self.timezone!r}, locale={self.locale!r}, "
            f"resolver={self.resolver!r})"
        )


def _detect_timezone() -> str:
    key = get_tz_key()
    if key is None:
        _log.warning(
            "Could not determine the system timezone, using %r",
            FALLBACK_TIMEZONE,
        )
        return FALLBACK_TIMEZONE
    return key


def _detect_locale() -> str:
    # Same lookup order as the C library for LC_TIME
    for var in ("LC_ALL", "LC_TIME", "LANG"):
        if value := os.environ.get(var):
            break
    else:
        return FALLBACK_LOCALE

    # e.g. "pt_BR.UTF-8@euro" -> "pt-BR"
    lang = value.split(".", 1)[0].split("@", 1)[0]
    if lang in ("", "C", "POSIX"):
        return FALLBACK_LOCALE
    return lang.replace("_", "-")


defaults = Defaults.from_environment()
