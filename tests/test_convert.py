import pytest
from hypothesis import given
from hypothesis.strategies import integers, sampled_from

from wallclock import (
    CivilFields,
    RuleTable,
    RuleTableResolver,
    ZoneInfoResolver,
    ZoneResolutionError,
    to_civil,
    to_instant,
)
from wallclock._common import EPOCH_MS_MAX, EPOCH_MS_MIN, MS_PER_DAY

from .common import (
    FIXED_PLUS_5_30,
    HOUR_MS,
    SHIFTY,
    SHIFTY_FALL,
    SHIFTY_SPRING,
    SYNTHETIC,
    mk_millis,
)

TZDB = ZoneInfoResolver()


class TestToCivil:
    def test_typical(self):
        assert to_civil(
            mk_millis(2025, 10, 1, 17, 30), "America/Sao_Paulo", TZDB
        ) == CivilFields(2025, 9, 1, 14, 30, 0, 0)

    def test_offset_crosses_day(self):
        assert to_civil(
            mk_millis(2025, 1, 1, 20), FIXED_PLUS_5_30, SYNTHETIC
        ) == CivilFields(2025, 0, 2, 1, 30)

    def test_around_transition(self):
        assert to_civil(SHIFTY_SPRING - 1, SHIFTY, SYNTHETIC) == CivilFields(
            2021, 2, 14, 1, 59, 59, 999
        )
        assert to_civil(SHIFTY_SPRING, SHIFTY, SYNTHETIC) == CivilFields(
            2021, 2, 14, 3, 0, 0, 0
        )

    def test_unknown_zone(self):
        with pytest.raises(ZoneResolutionError):
            to_civil(0, "Nowhere/Special", TZDB)


class TestToInstant:
    def test_typical(self):
        assert to_instant(
            CivilFields(2025, 9, 1, 14, 30), "America/Sao_Paulo", TZDB
        ) == mk_millis(2025, 10, 1, 17, 30)

    def test_historical(self):
        # Sao Paulo used local mean time (-03:06:28) in 1900
        assert to_instant(
            CivilFields(1900, 0, 1, 20, 30), "America/Sao_Paulo", TZDB
        ) == mk_millis(1900, 1, 1, 23, 36, 28)

    def test_dst_in_effect(self):
        assert to_instant(
            CivilFields(2024, 6, 4, 12), "Europe/Amsterdam", TZDB
        ) == mk_millis(2024, 7, 4, 10)

    def test_offset_at_naive_instant_is_wrong(self):
        # The naive instant (03:30 UTC) is before the transition, but the
        # requested time isn't. The second lookup corrects for this.
        assert to_instant(
            CivilFields(2021, 2, 14, 3, 30), SHIFTY, SYNTHETIC
        ) == SHIFTY_SPRING + HOUR_MS // 2

    def test_rollover(self):
        assert to_instant(
            CivilFields(2025, 12, 1), "America/Sao_Paulo", TZDB
        ) == mk_millis(2026, 1, 1, 3)

    def test_gap_is_not_disambiguated(self):
        # 02:30 doesn't exist on this day. We get the instant one hour
        # *before* the transition, which reads as 01:30 in the old offset.
        fields = CivilFields(2021, 2, 14, 2, 30)
        instant = to_instant(fields, SHIFTY, SYNTHETIC)
        assert instant == SHIFTY_SPRING - HOUR_MS // 2
        assert to_civil(instant, SHIFTY, SYNTHETIC) == CivilFields(
            2021, 2, 14, 1, 30
        )

    def test_fold_resolves_to_earlier(self):
        # 01:30 occurs twice on this day. We get the first occurrence.
        fields = CivilFields(2021, 10, 7, 1, 30)
        earlier = SHIFTY_FALL - HOUR_MS // 2
        later = SHIFTY_FALL + HOUR_MS // 2
        assert to_civil(earlier, SHIFTY, SYNTHETIC) == fields
        assert to_civil(later, SHIFTY, SYNTHETIC) == fields
        assert to_instant(fields, SHIFTY, SYNTHETIC) == earlier

    def test_unknown_zone(self):
        with pytest.raises(ZoneResolutionError):
            to_instant(CivilFields(2025, 0, 1), "Nowhere/Special", TZDB)

    def test_out_of_range(self):
        with pytest.raises(ZoneResolutionError):
            to_instant(CivilFields(10_000, 0, 1), "UTC", TZDB)


# Zones without any transitions in the given range
@given(
    integers(EPOCH_MS_MIN + MS_PER_DAY, EPOCH_MS_MAX - MS_PER_DAY),
    integers(-23 * 60, 23 * 60).map(lambda m: m * 60),
)
def test_roundtrip_fixed_offset(instant, offset):
    resolver = RuleTableResolver({"Test/Fixed": RuleTable.fixed(offset)})
    civil = to_civil(instant, "Test/Fixed", resolver)
    assert to_instant(civil, "Test/Fixed", resolver) == instant


@given(
    integers(mk_millis(2020, 1, 1), mk_millis(2100, 1, 1)),
    sampled_from(["America/Sao_Paulo", "Asia/Tokyo", "UTC", "Asia/Kolkata"]),
)
def test_roundtrip_tzdb(instant, zone):
    assert to_instant(to_civil(instant, zone, TZDB), zone, TZDB) == instant


@given(integers(mk_millis(2020, 1, 1), mk_millis(2023, 1, 1)))
def test_roundtrip_outside_fold(instant):
    # Everything round-trips, except the second pass through the
    # repeated hour.
    if SHIFTY_FALL <= instant < SHIFTY_FALL + HOUR_MS:
        return
    civil = to_civil(instant, SHIFTY, SYNTHETIC)
    assert to_instant(civil, SHIFTY, SYNTHETIC) == instant
