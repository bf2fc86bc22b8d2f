"""Conversion between instants and civil fields in a named zone.

The offset of a zone is a function of the *instant*, so the civil -> instant
direction can't look it up directly. We seed the lookup with the "naive"
instant (the fields read as if they were UTC) and refine it once.
"""

from __future__ import annotations

from typing import NamedTuple

from ._common import MS_PER_SECOND, Millis
from ._math import epoch_millis_from_fields, fields_from_epoch_millis
from ._tz import OffsetResolver


class CivilFields(NamedTuple):
    """A calendar-and-clock reading. Only meaningful paired with a zone.

    ``month`` is 0-based (0 = January). Fields are not range-checked:
    out-of-range values roll over into the next unit when converted.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    millisecond: int = 0


def to_civil(
    instant: Millis, zone: str, resolver: OffsetResolver
) -> CivilFields:
    offset = resolver.resolve_offset(instant, zone)
    return CivilFields(
        *fields_from_epoch_millis(instant + offset * MS_PER_SECOND)
    )


def to_instant(
    fields: CivilFields, zone: str, resolver: OffsetResolver
) -> Millis:
    # Gaps and folds aren't disambiguated: whatever offset applies at the
    # guess instant wins.
    naive = epoch_millis_from_fields(*fields)
    guess = naive - resolver.resolve_offset(naive, zone) * MS_PER_SECOND
    return naive - resolver.resolve_offset(guess, zone) * MS_PER_SECOND
