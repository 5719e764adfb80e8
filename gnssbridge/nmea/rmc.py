"""RMC sentence parser.

RMC (Recommended Minimum Specific GNSS Data) carries time, position,
speed and course together with a status flag telling whether the receiver
considers the data valid.

RMC Sentence Format:
    $GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A
           |      | |        | |         | |     |     |      |
           |      | |        | |         | |     |     |      +-- Magnetic variation
           |      | |        | |         | |     |     +-- Date (DDMMYY)
           |      | |        | |         | |     +-- Course over ground (degrees true)
           |      | |        | |         | +-- Speed over ground (knots)
           |      | |        | +---------+-- Longitude + E/W
           |      | +--------+-- Latitude + N/S
           |      +-- Status (A=active, V=void)
           +-- UTC time (HHMMSS.ss)
"""

from collections.abc import Sequence

from gnssbridge.nmea.fields import (
    convert_to_decimal_degrees,
    knots_to_meters_per_second,
    parse_float_field,
    parse_string_field,
    parse_utc_time_ms,
)
from gnssbridge.nmea.types import RMCData

# Address field plus time, status, lat, N/S, lon, E/W, speed, course
_MINIMUM_FIELD_COUNT = 9
_STATUS_ACTIVE = "A"


def parse_rmc(fields: Sequence[str]) -> RMCData | None:
    """Parse the fields of an RMC sentence.

    Maps NMEA field indices to RMCData attributes:
        fields[1] -> utc_time_ms
        fields[2] -> status
        fields[3] -> latitude (fields[4] hemisphere)
        fields[5] -> longitude (fields[6] hemisphere)
        fields[7] -> speed (knots, converted to m/s)
        fields[8] -> course (degrees true)

    Args:
        fields: Tokenized sentence, address field first

    Returns:
        RMCData, or None if the sentence has fewer than 9 fields. A void
        status still parses, with valid=False.
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        return None

    status = parse_string_field(fields[2])

    return RMCData(
        utc_time_ms=parse_utc_time_ms(fields[1]),
        latitude_degrees=convert_to_decimal_degrees(fields[3], fields[4]),
        longitude_degrees=convert_to_decimal_degrees(fields[5], fields[6]),
        speed_meters_per_second=knots_to_meters_per_second(
            parse_float_field(fields[7])
        ),
        course_degrees=parse_float_field(fields[8]),
        status=status,
        valid=status == _STATUS_ACTIVE,
    )
