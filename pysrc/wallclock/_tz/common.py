from __future__ import annotations

from typing import Protocol

from .._common import Millis, Offset


class OffsetResolver(Protocol):
    """Anything that can tell the UTC offset of a timezone at an instant."""

    def resolve_offset(self, instant: Millis, zone: str, /) -> Offset:
        """The offset (in seconds) in effect at ``instant`` in ``zone``.

        Raises ``ZoneResolutionError`` if the zone is unknown, or if the
        instant is outside of the supported range.
        """
        ...


class ZoneResolutionError(ValueError):
    """A timezone offset could not be resolved"""

    @classmethod
    def for_key(cls, key: str) -> ZoneResolutionError:
        return cls(f"No time zone found for key: {key!r}")

    @classmethod
    def out_of_range(cls, instant: Millis, key: str) -> ZoneResolutionError:
        return cls(f"Instant {instant} out of range for time zone {key!r}")
