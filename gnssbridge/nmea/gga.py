"""GGA sentence parser.

GGA (Global Positioning System Fix Data) provides position fix information
including coordinates, altitude, fix quality, and satellite/accuracy metrics.

GGA Sentence Format:
    $GPGGA,123519,4807.038,N,01131.000,E,1,08,0.9,545.4,M,46.9,M,,*47
           |      |        | |         | | |  |   |     | |     |
           |      |        | |         | | |  |   |     | |     +-- DGPS info (optional)
           |      |        | |         | | |  |   |     | +-- Geoid height (M=meters)
           |      |        | |         | | |  |   +-----+-- Altitude above MSL
           |      |        | |         | | |  +-- HDOP (horizontal dilution)
           |      |        | |         | | +-- Number of satellites
           |      |        | |         | +-- Fix quality (0-6)
           |      |        | +---------+-- Longitude + E/W
           |      +--------+-- Latitude + N/S
           +-- UTC time (HHMMSS.ss)

Only the fields up to and including the altitude are required; receivers
that truncate the geoid and DGPS fields are still accepted.
"""

from collections.abc import Sequence

from gnssbridge.nmea.fields import (
    convert_to_decimal_degrees,
    parse_float_field,
    parse_int_field,
    parse_utc_time_ms,
)
from gnssbridge.nmea.types import GGAData

# Address field plus the 9 fields up to altitude
_MINIMUM_FIELD_COUNT = 10


def parse_gga(fields: Sequence[str]) -> GGAData | None:
    """Parse the fields of a GGA sentence.

    Maps NMEA field indices to GGAData attributes:
        fields[1]  -> utc_time_ms
        fields[2]  -> latitude (fields[3] hemisphere)
        fields[4]  -> longitude (fields[5] hemisphere)
        fields[6]  -> fix_quality (0-6)
        fields[7]  -> num_satellites
        fields[8]  -> HDOP
        fields[9]  -> altitude above MSL (meters)

    Note: fix_quality defaults to 0 (invalid) if the field is empty,
    since 0 already means "no fix" semantically.

    Args:
        fields: Tokenized sentence, address field first

    Returns:
        GGAData, or None if the sentence has fewer than 10 fields
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        return None

    fix_quality = parse_int_field(fields[6]) or 0

    return GGAData(
        utc_time_ms=parse_utc_time_ms(fields[1]),
        latitude_degrees=convert_to_decimal_degrees(fields[2], fields[3]),
        longitude_degrees=convert_to_decimal_degrees(fields[4], fields[5]),
        fix_quality=fix_quality,
        num_satellites=parse_int_field(fields[7]),
        horizontal_dilution_of_precision=parse_float_field(fields[8]),
        altitude_meters=parse_float_field(fields[9]),
        valid=fix_quality > 0,
    )
