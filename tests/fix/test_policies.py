"""Tests for the readiness policies."""

import pytest

from gnssbridge.fix import (
    CompositeFix,
    FixAccumulator,
    InactivityTimeoutPolicy,
    MonotonicTimePolicy,
)

RMC = "$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"
GGA = "$GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47"
GGA_NO_FIX = "$GPGGA,123519,4807.038,N,01131.000,E,0,00,,,M,,M,,"
GGA_NEXT = "$GPGGA,123520,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,"
RMC_NEXT = "$GPRMC,123520,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W"


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _ready_fix(**overrides) -> CompositeFix:
    values = dict(
        latitude_degrees=48.1173,
        longitude_degrees=11.5166667,
        fix_time_ms=45319000,
        fix_mode=3,
        satellites_used=5,
        fix_quality=1,
        rmc_observed=True,
        gga_observed=True,
    )
    values.update(overrides)
    return CompositeFix(**values)


class TestMonotonicTimePolicy:
    def test_emits_and_advances_watermark(self):
        fix = _ready_fix()
        assert MonotonicTimePolicy().try_emit(fix) is True
        assert fix.last_emitted_ms == 45319000

    def test_does_not_emit_same_time_twice(self):
        policy = MonotonicTimePolicy()
        fix = _ready_fix()
        policy.try_emit(fix)
        assert policy.try_emit(fix) is False

    @pytest.mark.parametrize(
        "overrides",
        [
            {"rmc_observed": False},
            {"gga_observed": False},
            {"fix_mode": 1},
            {"satellites_used": 2},
            {"latitude_degrees": None},
            {"longitude_degrees": None},
            {"fix_time_ms": None},
        ],
    )
    def test_not_ready(self, overrides):
        fix = _ready_fix(**overrides)
        assert MonotonicTimePolicy().try_emit(fix) is False
        assert fix.last_emitted_ms == -1

    def test_missing_time_keeps_watermark(self):
        policy = MonotonicTimePolicy()
        fix = _ready_fix()
        policy.try_emit(fix)
        fix.fix_time_ms = None
        assert policy.try_emit(fix) is False
        assert fix.last_emitted_ms == 45319000

    def test_ignores_gga_fix_quality(self):
        assert MonotonicTimePolicy().try_emit(_ready_fix(fix_quality=0)) is True


class TestInactivityTimeoutPolicy:
    @pytest.fixture
    def clock(self) -> FakeClock:
        return FakeClock()

    @pytest.fixture
    def accumulator(self, clock) -> FixAccumulator:
        return FixAccumulator(InactivityTimeoutPolicy(clock=clock))

    def test_emits_on_rmc_gga_pair_without_gsa(self, accumulator):
        assert accumulator.on_nmea(RMC) is None
        assert accumulator.on_nmea(GGA) == (
            "XGPS,48.1173000,11.5166667,545.4,11.52,84.4,1,45319"
        )

    def test_requires_gga_fix_quality(self, accumulator):
        accumulator.on_nmea(RMC)
        assert accumulator.on_nmea(GGA_NO_FIX) is None

    def test_holds_until_timeout(self, accumulator, clock):
        accumulator.on_nmea(RMC)
        accumulator.on_nmea(GGA)
        clock.now += 1.0
        assert accumulator.on_nmea(RMC_NEXT) is None
        assert accumulator.on_nmea(GGA_NEXT) is None

    def test_requires_fresh_pair_after_timeout(self, accumulator, clock):
        accumulator.on_nmea(RMC)
        accumulator.on_nmea(GGA)
        clock.now += 1.5
        assert accumulator.on_nmea(GGA_NEXT) is None
        assert accumulator.fix.rmc_observed is False
        assert accumulator.on_nmea(RMC_NEXT) is not None

    def test_timestamp_is_not_compared(self, accumulator, clock):
        accumulator.on_nmea(RMC)
        accumulator.on_nmea(GGA)
        clock.now += 2.0
        accumulator.on_nmea(RMC)
        assert accumulator.on_nmea(GGA) is not None

    def test_reset_clears_emitted_flag(self, clock):
        policy = InactivityTimeoutPolicy(clock=clock)
        fix = _ready_fix()
        assert policy.try_emit(fix) is True
        assert policy.emitted is True
        policy.reset()
        assert policy.emitted is False
        assert policy.try_emit(fix) is True

    def test_requires_fix_time(self, clock):
        policy = InactivityTimeoutPolicy(clock=clock)
        fix = _ready_fix(fix_time_ms=None)
        assert policy.try_emit(fix) is False
        assert policy.emitted is False
        assert fix.last_emitted_ms == -1

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError, match="timeout"):
            InactivityTimeoutPolicy(timeout=0)
