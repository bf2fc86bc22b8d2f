from .common import OffsetResolver, ZoneResolutionError
from .rules import RuleTable, RuleTableResolver
from .store import ZoneInfoResolver, get_tz, validate_tzid

__all__ = [
    "OffsetResolver",
    "ZoneResolutionError",
    "RuleTable",
    "RuleTableResolver",
    "ZoneInfoResolver",
    "get_tz",
    "validate_tzid",
]
