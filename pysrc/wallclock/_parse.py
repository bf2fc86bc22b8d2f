import re
from typing import NoReturn

from ._convert import CivilFields

# YYYY-MM-DD, optionally followed by 'T' or a space, HH:mm, and optional :ss
_match_civil_str = re.compile(
    r"([0-9]{4})-([0-9]{2})-([0-9]{2})"
    r"(?:[T ]([0-9]{2}):([0-9]{2})(?::([0-9]{2}))?)?",
    re.ASCII,
).fullmatch


class FormatError(ValueError):
    """A string doesn't match the accepted datetime format"""

    @classmethod
    def for_string(cls, s: object) -> "FormatError":
        return cls(
            f"Invalid datetime format: {s!r}. Use YYYY-MM-DDTHH:mm[:ss]"
        )


def _parse_err(s: object) -> NoReturn:
    raise FormatError.for_string(s) from None


def civil_from_str(s: str) -> CivilFields:
    """Parse ``YYYY-MM-DD[(T| )HH:mm[:ss]]`` into civil fields.

    The numbers are taken as-is: they aren't range-checked, so that
    out-of-range values roll over like any other field update.
    """
    if not isinstance(s, str) or (match := _match_civil_str(s)) is None:
        _parse_err(s)

    year, month, day, hour, minute, second = (
        int(g) if g else 0 for g in match.groups()
    )
    return CivilFields(year, month - 1, day, hour, minute, second)
