"""XGPS status-line encoder.

XGPS is the single-line GPS status format read by navigation and
instrument-display apps listening on the local network:

    XGPS,48.1173000,11.5166667,545.4,11.52,84.4,3,45319
         |          |          |     |     |    | |
         |          |          |     |     |    | +-- Fix time, whole seconds since midnight UTC
         |          |          |     |     |    +-- Fix mode (1=no fix, 2=2D, 3=3D)
         |          |          |     |     +-- Course over ground (degrees, 1 decimal)
         |          |          |     +-- Speed over ground (m/s, 2 decimals)
         |          |          +-- Altitude MSL (meters, 1 decimal)
         |          +-- Longitude (decimal degrees, 7 decimals)
         +-- Latitude (decimal degrees, 7 decimals)

Str.format is locale independent, so the decimal separator is always '.'.
"""

from gnssbridge.fix.types import CompositeFix

XGPS_TAG = "XGPS"


def encode_xgps(fix: CompositeFix) -> str:
    """Render a composite fix as an XGPS line.

    Altitude, speed and course that were never observed are sent as 0.0.

    Raises:
        ValueError: If the fix has no position or no fix time.
    """
    if fix.latitude_degrees is None or fix.longitude_degrees is None:
        raise ValueError("Cannot encode a fix without a position.")
    if fix.fix_time_ms is None:
        raise ValueError("Cannot encode a fix without a fix time.")

    altitude = fix.altitude_meters if fix.altitude_meters is not None else 0.0
    speed = (
        fix.speed_meters_per_second
        if fix.speed_meters_per_second is not None
        else 0.0
    )
    course = fix.course_degrees if fix.course_degrees is not None else 0.0

    return (
        f"{XGPS_TAG},{fix.latitude_degrees:.7f},{fix.longitude_degrees:.7f},"
        f"{altitude:.1f},{speed:.2f},{course:.1f},"
        f"{fix.fix_mode:d},{fix.fix_time_ms // 1000:d}"
    )
