"""In-memory offset rule tables.

Useful for synthetic zones (e.g. in tests), or when the offset history
comes from somewhere other than the tz database.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from .._common import EPOCH_MS_MAX, EPOCH_MS_MIN, Millis, Offset, check_int
from .common import ZoneResolutionError

MAX_OFFSET = 24 * 3600


class RuleTable:
    """The offset history of a single zone.

    Read the transitions ``((X, Y), ...)`` as "FROM instant X onwards
    (in epoch milliseconds) the offset is Y seconds". Before the first
    transition, ``initial`` applies.
    """

    __slots__ = ("initial", "transitions")

    initial: Offset
    transitions: tuple[tuple[Millis, Offset], ...]

    def __init__(
        self,
        initial: Offset,
        transitions: Iterable[tuple[Millis, Offset]] = (),
    ):
        self.initial = _check_offset(initial)
        self.transitions = tuple(
            (check_int(t, "transition instant"), _check_offset(o))
            for t, o in transitions
        )
        if any(
            a >= b
            for (a, _), (b, _) in zip(self.transitions, self.transitions[1:])
        ):
            raise ValueError("Transitions must be strictly increasing")

    @classmethod
    def fixed(cls, offset: Offset) -> RuleTable:
        """A zone that never changes its offset"""
        return cls(offset)

    def offset_for_instant(self, t: Millis) -> Offset:
        """Get the UTC offset at the given exact time"""
        idx = bisect(self.transitions, t)
        if idx is None:
            idx = len(self.transitions)
        return self.transitions[idx - 1][1] if idx else self.initial

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleTable):
            return NotImplemented
        return (
            self.initial == other.initial
            and self.transitions == other.transitions
        )

    def __repr__(self) -> str:
        return f"RuleTable({self.initial}, {list(self.transitions)})"


def bisect(arr: Sequence[tuple[Millis, object]], x: Millis) -> Optional[int]:
    """Bisect the array of (time, value) pairs to find the INDEX at the given time.
    Return None if after the last entry.
    """
    size = len(arr)
    left = 0
    right = size

    while left < right:
        mid = left + size // 2

        if x >= arr[mid][0]:
            left = mid + 1
        else:
            right = mid
        size = right - left

    return left if left != len(arr) else None


def _check_offset(offset: Offset) -> Offset:
    if not -MAX_OFFSET < check_int(offset, "offset") < MAX_OFFSET:
        raise ValueError(f"offset out of range: {offset}")
    return offset


class RuleTableResolver:
    """Resolves offsets from a fixed mapping of zone keys to rule tables.

    Example
    -------
    >>> resolver = RuleTableResolver({
    ...     "Test/Shift": RuleTable(-3 * 3600, [(1_000_000, -2 * 3600)]),
    ... })
    >>> resolver.resolve_offset(0, "Test/Shift")
    -10800
    """

    __slots__ = ("_zones",)

    def __init__(self, zones: Mapping[str, RuleTable]):
        self._zones = dict(zones)

    def resolve_offset(self, instant: Millis, zone: str, /) -> Offset:
        try:
            table = self._zones[zone]
        except KeyError:
            raise ZoneResolutionError.for_key(zone) from None
        if not EPOCH_MS_MIN <= instant <= EPOCH_MS_MAX:
            raise ZoneResolutionError.out_of_range(instant, zone)
        return table.offset_for_instant(instant)

    def __repr__(self) -> str:
        return f"RuleTableResolver({sorted(self._zones)})"
