# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - The DateTime class only stores the instant and the zone. Every civil
#   field is derived on access. This keeps a single source of truth, at the
#   cost of an offset lookup per access.
# - All offset lookups go through the resolver captured at construction.
#   Nothing in this module knows about the tz database.
from __future__ import annotations

__version__ = "0.1.0"

import enum
import re
from datetime import (
    datetime as _datetime,
    timedelta as _timedelta,
    timezone as _timezone,
)
from functools import lru_cache
from struct import pack, unpack
from time import time_ns
from typing import Optional, no_type_check
from zoneinfo import ZoneInfo

from . import _defaults
from ._common import MS_PER_SECOND, UNIX_EPOCH, Millis, Offset, check_int
from ._convert import CivilFields, to_civil, to_instant
from ._defaults import Defaults
from ._parse import FormatError, civil_from_str
from ._tz import OffsetResolver, ZoneResolutionError

__all__ = [
    "DateTime",
    "CivilFields",
    "Field",
    "with_field",
    "to_civil",
    "to_instant",
    "json_default",
    # Exceptions
    "FormatError",
    "ZoneResolutionError",
]

_object_new = object.__new__
_MS_PER_NANO = 1_000_000
_ONE_MS = _timedelta(milliseconds=1)


class Field(enum.Enum):
    """The civil fields of a :class:`DateTime`. ``.value`` is the
    attribute name."""

    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MILLISECOND = "millisecond"


def with_field(fields: CivilFields, field: Field, value: int) -> CivilFields:
    """Return a copy of ``fields`` with exactly one field replaced.

    The value isn't range-checked. Other fields are left as they are,
    even if they are inconsistent (e.g. day 31 in a 30-day month).
    """
    if not isinstance(field, Field):
        raise TypeError(f"field must be a Field, got {field!r}")
    return fields._replace(**{field.value: check_int(value, field.value)})


class DateTime:
    """A wall-clock reading in a named timezone, backed by an exact instant.

    Only the instant (milliseconds since the UNIX epoch) and the zone are
    stored. The civil fields are derived from them using the zone's offset
    *at that instant*, so historical offsets and DST are respected.

    Example
    -------
    >>> d = DateTime.parse("2025-10-01T14:30:00", "America/Sao_Paulo")
    >>> d
    DateTime(2025-10-01T14:30:00-03:00[America/Sao_Paulo])
    >>> d.month  # 0-based!
    9
    >>> d.hour += 6
    >>> str(d)
    '2025-10-01T20:30:00-03:00'

    Note
    ----
    Setting a field keeps all *other* civil fields as they were, even if
    the change crosses a DST transition. This is different from shifting
    the instant by a fixed amount.

    Important
    ---------
    Civil times that are skipped or repeated by a DST transition are
    not disambiguated. Whichever offset is in effect close to the
    requested time is used, without raising an error.
    """

    __slots__ = ("_instant", "_zone", "_resolver")

    _instant: Millis
    _zone: str
    _resolver: OffsetResolver

    def __init__(
        self,
        instant: Millis,
        zone: Optional[str] = None,
        *,
        context: Optional[Defaults] = None,
        resolver: Optional[OffsetResolver] = None,
    ) -> None:
        zone, resolver = _apply_defaults(zone, resolver, context)
        self._instant = check_int(instant, "instant")
        self._zone = zone
        self._resolver = resolver
        # Fail early on unknown zones and out-of-range instants
        resolver.resolve_offset(self._instant, zone)

    @classmethod
    def parse(
        cls,
        s: str,
        /,
        zone: Optional[str] = None,
        *,
        context: Optional[Defaults] = None,
        resolver: Optional[OffsetResolver] = None,
    ) -> DateTime:
        """Create an instance from a civil string in the given zone.

        The format is ``YYYY-MM-DD``, optionally followed by ``T`` (or a
        space) and ``HH:mm`` or ``HH:mm:ss``. The string is read as the
        wall-clock time *in the zone*, not as UTC.

        Example
        -------
        >>> DateTime.parse("2025-10-01 14:30", "America/Sao_Paulo")
        DateTime(2025-10-01T14:30:00-03:00[America/Sao_Paulo])
        """
        return cls.from_civil(
            civil_from_str(s), zone, context=context, resolver=resolver
        )

    @classmethod
    def from_civil(
        cls,
        fields: CivilFields,
        /,
        zone: Optional[str] = None,
        *,
        context: Optional[Defaults] = None,
        resolver: Optional[OffsetResolver] = None,
    ) -> DateTime:
        """Create an instance from civil fields in the given zone.
        Out-of-range fields roll over."""
        if not isinstance(fields, CivilFields):
            raise TypeError(f"expected CivilFields, got {fields!r}")
        for name, value in zip(fields._fields, fields):
            check_int(value, name)
        zone, resolver = _apply_defaults(zone, resolver, context)
        return cls._from_instant_unchecked(
            to_instant(fields, zone, resolver), zone, resolver
        )

    @classmethod
    def now(
        cls,
        zone: Optional[str] = None,
        *,
        context: Optional[Defaults] = None,
        resolver: Optional[OffsetResolver] = None,
    ) -> DateTime:
        """Create an instance from the current time in the given zone."""
        return cls(
            _now_millis(),
            zone,
            context=context,
            resolver=resolver,
        )

    @classmethod
    def from_py_datetime(
        cls,
        d: _datetime,
        /,
        zone: Optional[str] = None,
        *,
        context: Optional[Defaults] = None,
        resolver: Optional[OffsetResolver] = None,
    ) -> DateTime:
        """Create an instance from an aware standard library ``datetime``.

        If no zone is given, the key of a ``ZoneInfo`` tzinfo is used.
        Otherwise, the default zone applies. Microseconds are truncated.
        """
        if d.utcoffset() is None:
            raise ValueError("Cannot create DateTime from a naive datetime")
        if zone is None and type(d.tzinfo) is ZoneInfo:
            zone = d.tzinfo.key
        return cls(
            (d - UNIX_EPOCH) // _ONE_MS,
            zone,
            context=context,
            resolver=resolver,
        )

    @classmethod
    def _from_instant_unchecked(
        cls, instant: Millis, zone: str, resolver: OffsetResolver
    ) -> DateTime:
        self = _object_new(cls)
        self._instant = instant
        self._zone = zone
        self._resolver = resolver
        return self

    @property
    def instant(self) -> Millis:
        """The exact time, in milliseconds since the UNIX epoch"""
        return self._instant

    @property
    def zone(self) -> str:
        """The timezone ID"""
        return self._zone

    @property
    def resolver(self) -> OffsetResolver:
        return self._resolver

    @property
    def offset(self) -> Offset:
        """The UTC offset (in seconds) of the zone at this instant"""
        return self._resolver.resolve_offset(self._instant, self._zone)

    def civil(self) -> CivilFields:
        """All civil fields at once, in the zone of this datetime"""
        return to_civil(self._instant, self._zone, self._resolver)

    @property
    def year(self) -> int:
        return self.civil().year

    @year.setter
    def year(self, value: int) -> None:
        self.set_field(Field.YEAR, value)

    @property
    def month(self) -> int:
        """The month, 0-based (January is 0)"""
        return self.civil().month

    @month.setter
    def month(self, value: int) -> None:
        self.set_field(Field.MONTH, value)

    @property
    def day(self) -> int:
        return self.civil().day

    @day.setter
    def day(self, value: int) -> None:
        self.set_field(Field.DAY, value)

    @property
    def hour(self) -> int:
        return self.civil().hour

    @hour.setter
    def hour(self, value: int) -> None:
        self.set_field(Field.HOUR, value)

    @property
    def minute(self) -> int:
        return self.civil().minute

    @minute.setter
    def minute(self, value: int) -> None:
        self.set_field(Field.MINUTE, value)

    @property
    def second(self) -> int:
        return self.civil().second

    @second.setter
    def second(self, value: int) -> None:
        self.set_field(Field.SECOND, value)

    @property
    def millisecond(self) -> int:
        return self.civil().millisecond

    @millisecond.setter
    def millisecond(self, value: int) -> None:
        self.set_field(Field.MILLISECOND, value)

    def set_field(self, field: Field, value: int, /) -> None:
        """Set one civil field, keeping the other civil fields as they are.

        The instant is recomputed from the updated fields. Out-of-range
        values roll over into the next unit (e.g. hour 25 is 1 AM the
        next day).

        Example
        -------
        >>> d = DateTime.parse("2024-03-09 14:30", "America/New_York")
        >>> d.set_field(Field.DAY, 10)  # across the DST transition
        >>> d
        DateTime(2024-03-10T14:30:00-04:00[America/New_York])
        """
        self._instant = to_instant(
            with_field(self.civil(), field, value),
            self._zone,
            self._resolver,
        )

    def replace(self, **kwargs: int) -> DateTime:
        """Construct a new instance with the given civil fields replaced.

        Unlike the field setters, this leaves the original untouched.
        All fields are replaced before the instant is recomputed.

        Example
        -------
        >>> d = DateTime.parse("2025-01-31", "Europe/Paris")
        >>> d.replace(month=1, day=28)
        DateTime(2025-02-28T00:00:00+01:00[Europe/Paris])
        """
        fields = self.civil()
        for name, value in kwargs.items():
            try:
                field = Field(name)
            except ValueError:
                raise TypeError(
                    f"Invalid field for replace(): {name!r}"
                ) from None
            fields = with_field(fields, field, value)
        return self._from_instant_unchecked(
            to_instant(fields, self._zone, self._resolver),
            self._zone,
            self._resolver,
        )

    def to_tz(self, zone: str, /) -> DateTime:
        """Convert to the same instant in another zone"""
        return DateTime(self._instant, zone, resolver=self._resolver)

    def format(self, template: str, /) -> str:
        """Format according to a template with the tokens
        ``yyyy``, ``MM``, ``dd``, ``HH``, ``mm``, ``ss``.

        Each token is replaced with the zero-padded civil field (``MM`` is
        the 1-based month). Everything else is copied as-is.

        Example
        -------
        >>> d = DateTime.parse("2025-10-01T14:30:00", "America/Sao_Paulo")
        >>> d.format("dd/MM/yyyy HH:mm:ss")
        '01/10/2025 14:30:00'
        """
        f = self.civil()
        values = {
            "yyyy": f"{f.year:04d}",
            "MM": f"{f.month + 1:02d}",
            "dd": f"{f.day:02d}",
            "HH": f"{f.hour:02d}",
            "mm": f"{f.minute:02d}",
            "ss": f"{f.second:02d}",
        }
        return _sub_format_tokens(lambda m: values[m[0]], template)

    def to_epoch_millis(self) -> Millis:
        """The instant, in milliseconds since the UNIX epoch.
        Same as ``int(d)``."""
        return self._instant

    def to_canonical_string(self) -> str:
        """Format as ``YYYY-MM-DDTHH:mm:ss±HH:mm``. Same as ``str(d)``.

        The offset is the zone's offset at this instant. Offsets with a
        seconds component (e.g. local mean time) are truncated to minutes.
        """
        return (
            self.format("yyyy-MM-ddTHH:mm:ss")
            + _format_offset(self.offset)
        )

    def py_datetime(self) -> _datetime:
        """Convert to a standard library ``datetime`` with a fixed-offset
        tzinfo"""
        f = self.civil()
        return _datetime(
            f.year,
            f.month + 1,
            f.day,
            f.hour,
            f.minute,
            f.second,
            f.millisecond * 1_000,
            tzinfo=_mk_fixed_tzinfo(self.offset),
        )

    def exact_eq(self, other: DateTime, /) -> bool:
        """Compare objects by their instant *and* zone.
        ``==`` only compares the instant."""
        if type(other) is not DateTime:
            raise TypeError("Can't compare different types")
        return self._instant == other._instant and self._zone == other._zone

    def __int__(self) -> int:
        return self._instant

    def __float__(self) -> float:
        return float(self._instant)

    def __str__(self) -> str:
        return self.to_canonical_string()

    def __format__(self, spec: str) -> str:
        return self.format(spec) if spec else self.to_canonical_string()

    def __repr__(self) -> str:
        return f"DateTime({self.to_canonical_string()}[{self._zone}])"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant == other._instant

    # Instances are mutable, so they can't be hashed
    __hash__ = None  # type: ignore[assignment]

    def __lt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant < other._instant

    def __le__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant <= other._instant

    def __gt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant > other._instant

    def __ge__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._instant >= other._instant

    def __copy__(self) -> DateTime:
        return self._from_instant_unchecked(
            self._instant, self._zone, self._resolver
        )

    # Resolvers are treated as immutable, and are shared by copies
    def __deepcopy__(self, _: object) -> DateTime:
        return self.__copy__()

    # a custom pickle implementation with a smaller payload
    def __reduce__(self) -> tuple[object, ...]:
        return (
            _unpkl_datetime,
            (pack("<q", self._instant), self._zone, self._resolver),
        )


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_datetime(
    data: bytes, zone: str, resolver: OffsetResolver
) -> DateTime:
    (instant,) = unpack("<q", data)
    return DateTime._from_instant_unchecked(instant, zone, resolver)


def json_default(obj: object) -> str:
    """Serialize ``DateTime`` values as their canonical string.

    Example
    -------
    >>> json.dumps({"at": d}, default=json_default)
    '{"at": "2025-10-01T14:30:00-03:00"}'
    """
    if isinstance(obj, DateTime):
        return obj.to_canonical_string()
    raise TypeError(
        f"Object of type {type(obj).__name__} is not JSON serializable"
    )


_sub_format_tokens = re.compile("yyyy|MM|dd|HH|mm|ss").sub


def _now_millis() -> Millis:
    return time_ns() // _MS_PER_NANO


def _apply_defaults(
    zone: Optional[str],
    resolver: Optional[OffsetResolver],
    context: Optional[Defaults],
) -> tuple[str, OffsetResolver]:
    # Read at call time, so changes to the attributes of `wallclock.defaults`
    # apply to every later construction. Rebinding the name has no effect.
    ctx = _defaults.defaults if context is None else context
    return (
        ctx.timezone if zone is None else zone,
        ctx.resolver if resolver is None else resolver,
    )


def _format_offset(secs: Offset) -> str:
    hrs, mins = divmod(abs(secs) // 60, 60)
    sign = "-" if secs < 0 and (hrs or mins) else "+"
    return f"{sign}{hrs:02d}:{mins:02d}"


# We cache fixed-offset tzinfo objects to avoid creating multiple identical ones.
# It's very common to only have whole-hour offsets, so this helps a lot.
@lru_cache
def _mk_fixed_tzinfo(secs: Offset, /) -> _timezone:
    return _timezone(_timedelta(seconds=secs))


# We expose the public members in the root of the module.
# For clarity, we remove the "_pywallclock" part from the names,
# since this is an implementation detail.
for name in __all__:
    member = locals()[name]
    if getattr(member, "__module__", None) == __name__:  # pragma: no branch
        member.__module__ = "wallclock"

# clear up loop variables so they don't leak into the namespace
del name
del member

_unpkl_datetime.__module__ = "wallclock"


def _patch_time_frozen(instant: Millis) -> None:
    global time_ns

    def time_ns() -> int:
        return instant * _MS_PER_NANO


def _patch_time_keep_ticking(instant: Millis) -> None:
    global time_ns

    _patched_at = time_ns()
    _time_ns = time_ns

    def time_ns() -> int:
        return instant * _MS_PER_NANO + _time_ns() - _patched_at


def _unpatch_time() -> None:
    global time_ns

    from time import time_ns
