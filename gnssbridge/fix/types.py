"""Composite fix state assembled from several NMEA sentence types."""

from dataclasses import dataclass

NO_FIX = 1


@dataclass
class CompositeFix:
    """Mutable accumulator state merging RMC, GGA and GSA contributions.

    Each attribute is written only by the sentence type that defines it;
    the record as a whole is owned by one ``FixAccumulator``.

    Attributes:
        latitude_degrees: Decimal degrees, positive=North (RMC, GGA).
        longitude_degrees: Decimal degrees, positive=East (RMC, GGA).
        altitude_meters: Altitude above MSL (GGA).
        speed_meters_per_second: Speed over ground (RMC).
        course_degrees: Course over ground, degrees true (RMC).

        fix_time_ms: Milliseconds since midnight UTC of the most recent
            RMC or GGA, None until one has supplied a time.

        fix_mode: 1 = no fix, 2 = 2D, 3 = 3D (GSA).

        satellites_used: Running maximum of satellites reported by GSA
            sentences while the fix mode stays >= 2.

        fix_quality: GGA fix quality indicator, consulted only by the
            inactivity-timeout readiness policy.

        rmc_observed: A valid RMC has been applied in this epoch.
        gga_observed: A GGA has been applied in this epoch.

        last_emitted_ms: ``fix_time_ms`` of the last emitted fix, -1 before
            the first emission.
    """

    latitude_degrees: float | None = None
    longitude_degrees: float | None = None
    altitude_meters: float | None = None
    speed_meters_per_second: float | None = None
    course_degrees: float | None = None
    fix_time_ms: int | None = None
    fix_mode: int = NO_FIX
    satellites_used: int = 0
    fix_quality: int = 0
    rmc_observed: bool = False
    gga_observed: bool = False
    last_emitted_ms: int = -1

    @property
    def has_position(self) -> bool:
        return self.latitude_degrees is not None and self.longitude_degrees is not None
