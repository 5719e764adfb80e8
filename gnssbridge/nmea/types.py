"""NMEA data types for parsed sentences.

This module defines dataclasses for structured NMEA sentence data.

Design Decisions:
    1. Optional fields (float | None): NMEA fields may be empty, indicated by
       consecutive commas. Using None distinguishes "no data received" from
       "measured zero". The fix accumulator copies None through, so a later
       sentence with an empty field clears the attribute it defines.

    2. Separate valid flag: The valid field indicates navigation validity,
       NOT parse validity. A successfully parsed sentence may still be
       navigationally invalid (e.g., RMC status "V"). Parse errors are
       reported by the parser returning None instead.

    3. Times are integers in milliseconds since midnight UTC, the unit the
       accumulator compares when deduplicating fixes.
"""

from dataclasses import dataclass, field


@dataclass
class RMCData:
    """Parsed RMC (Recommended Minimum Specific GNSS Data) sentence.

    Attributes:
        utc_time_ms: UTC time of the fix in milliseconds since midnight.
            None if the field was empty.

        latitude_degrees: Latitude in decimal degrees, positive=North.
            None if field empty.

        longitude_degrees: Longitude in decimal degrees, positive=East.
            None if field empty.

        speed_meters_per_second: Speed over ground converted from knots.
            None if field empty.

        course_degrees: Course over ground, degrees true. None if field
            empty (receivers often leave it blank when stationary).

        status: Raw status indicator, "A" (active) or "V" (void).

        valid: True only if status is "A". Void sentences must not
            contribute to a fix.

    Example:
        >>> rmc = parse_rmc(tokenize("$GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A"))
        >>> rmc.speed_meters_per_second
        11.5235...
        >>> rmc.valid
        True
    """

    utc_time_ms: int | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    speed_meters_per_second: float | None
    course_degrees: float | None
    status: str | None
    valid: bool


@dataclass
class GGAData:
    """Parsed GGA (Global Positioning System Fix Data) sentence.

    Attributes:
        utc_time_ms: UTC time of the fix in milliseconds since midnight.

        latitude_degrees: Latitude in decimal degrees, positive=North.

        longitude_degrees: Longitude in decimal degrees, positive=East.

        fix_quality: GPS fix quality indicator (always present, defaults to 0):
            0 = Invalid (no fix)
            1 = GPS fix (SPS)
            2 = DGPS fix
            4 = RTK Fixed
            5 = RTK Float
            6 = Dead reckoning mode

        num_satellites: Number of satellites in use as reported by GGA.

        horizontal_dilution_of_precision: HDOP value.

        altitude_meters: Altitude above mean sea level in meters.

        valid: True only if fix_quality > 0.
    """

    utc_time_ms: int | None
    latitude_degrees: float | None
    longitude_degrees: float | None
    fix_quality: int
    num_satellites: int | None
    horizontal_dilution_of_precision: float | None
    altitude_meters: float | None
    valid: bool


@dataclass
class GSAData:
    """Parsed GSA (GNSS DOP and Active Satellites) sentence.

    Multi-constellation receivers emit one GSA per constellation and epoch,
    each listing only its own satellites.

    Attributes:
        selection_mode: "M" (manual) or "A" (automatic 2D/3D switching).

        fix_mode: 1 = no fix, 2 = 2D, 3 = 3D. Defaults to 1 when the
            field is empty or invalid.

        satellite_ids: PRNs of the non-empty satellite slots (at most 12).
            Always empty when fix_mode < 2.

        position_dilution_of_precision: PDOP value, None if missing.

        horizontal_dilution_of_precision: HDOP value, None if missing.

        vertical_dilution_of_precision: VDOP value, None if missing.

        valid: True only if fix_mode >= 2.
    """

    selection_mode: str | None
    fix_mode: int
    satellite_ids: tuple[str, ...] = field(default_factory=tuple)
    position_dilution_of_precision: float | None = None
    horizontal_dilution_of_precision: float | None = None
    vertical_dilution_of_precision: float | None = None
    valid: bool = False

    @property
    def satellites_used(self) -> int:
        """Number of satellites this sentence reports as used in the fix."""
        return len(self.satellite_ids)
