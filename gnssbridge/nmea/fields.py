"""NMEA field parsing utilities.

This module provides utilities for parsing individual fields from NMEA sentences.
NMEA fields are comma-separated and may be empty (consecutive commas indicate
missing data). These utilities handle empty fields gracefully by returning None,
allowing callers to distinguish "no data" from "zero value".
"""

import math

# 1 knot = 1852 m / 3600 s
KNOTS_TO_METERS_PER_SECOND = 0.514444


def parse_float_field(value: str) -> float | None:
    """Parse a string field to float, returning None if empty or invalid.

    NMEA fields may be empty (indicated by consecutive commas like ",,").
    This function treats empty strings as "no data" rather than an error.
    Non-finite values ("nan", "inf") are rejected as well, since no NMEA
    field legitimately carries them.

    Args:
        value: String value from an NMEA field

    Returns:
        Parsed float value, or None if the field is empty or unparseable

    Example:
        >>> parse_float_field("545.4")
        545.4
        >>> parse_float_field("")  # empty field
        None
    """
    if not value:
        return None
    try:
        result = float(value)
    except ValueError:
        return None
    if not math.isfinite(result):
        return None
    return result


def parse_int_field(value: str) -> int | None:
    """Parse a string field to int, returning None if empty or invalid.

    Example:
        >>> parse_int_field("08")
        8
        >>> parse_int_field("")
        None
    """
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_string_field(value: str) -> str | None:
    """Parse a string field, returning None if empty."""
    if not value:
        return None
    return value


def knots_to_meters_per_second(knots: float | None) -> float | None:
    """Convert a speed in knots to m/s, passing None through."""
    if knots is None:
        return None
    return knots * KNOTS_TO_METERS_PER_SECOND


def parse_utc_time_ms(value: str) -> int | None:
    """Convert an NMEA HHMMSS.sss time field to milliseconds since midnight.

    The field is read as one decimal number V and split arithmetically:

        hours   = floor(V / 10000)
        minutes = floor((V - hours * 10000) / 100)
        seconds = V - hours * 10000 - minutes * 100

    Fractional seconds are truncated, so every timestamp is a whole
    number of seconds expressed in milliseconds.

    Args:
        value: UTC time field (e.g., "123519" or "123519.00")

    Returns:
        Milliseconds since midnight UTC, or None if the field is empty
        or not a number

    Example:
        >>> parse_utc_time_ms("123519.00")
        45319000
        >>> parse_utc_time_ms("")
        None
    """
    time_value = parse_float_field(value)
    if time_value is None or time_value < 0:
        return None

    hours = int(time_value // 10000)
    minutes = int((time_value - hours * 10000) // 100)
    seconds = int(time_value - hours * 10000 - minutes * 100)

    return (hours * 3600 + minutes * 60 + seconds) * 1000


def _parse_coordinate_parts(value: str) -> tuple[int, float] | None:
    """Parse NMEA coordinate into degrees and minutes components.

    NMEA coordinates use DDDMM.MMMM format where:
    - DDD (or DD for latitude) = degrees
    - MM.MMMM = decimal minutes

    The decimal point position determines the split between degrees and minutes:
    the 2 digits before the decimal point are always minutes.

    Example:
        >>> _parse_coordinate_parts("4807.038")  # 48° 07.038'
        (48, 7.038)
        >>> _parse_coordinate_parts("01131.000")  # 11° 31.000'
        (11, 31.0)
    """
    try:
        dot_position = value.index(".")
        if dot_position < 2:
            return None
        # Minutes are always 2 digits before the decimal point
        degrees = int(value[: dot_position - 2] or "0")
        minutes = float(value[dot_position - 2 :])
        return degrees, minutes
    except (ValueError, IndexError):
        return None


def convert_to_decimal_degrees(
    value: str,
    direction: str,
) -> float | None:
    """Convert NMEA coordinate (DDDMM.MMMM) to decimal degrees.

    NMEA uses degrees-minutes format with a hemisphere indicator.
    This function converts to decimal degrees with sign convention:
    - North/East = positive
    - South/West = negative

    The conversion formula is:
        decimal_degrees = degrees + (minutes / 60)

    Args:
        value: Coordinate in DDDMM.MMMM format (e.g., "4807.038")
        direction: Hemisphere indicator ("N", "S", "E", or "W")

    Returns:
        Decimal degrees (negative for S/W), or None if the coordinate is
        empty or malformed

    Example:
        >>> convert_to_decimal_degrees("4807.038", "N")
        48.1173  # 48° + 7.038'/60
        >>> convert_to_decimal_degrees("01131.000", "W")
        -11.5166667  # negative for West
    """
    if not value:
        return None

    parts = _parse_coordinate_parts(value)
    if parts is None:
        return None

    degrees, minutes = parts
    decimal_degrees = degrees + minutes / 60.0

    if direction in ("S", "W"):
        return -decimal_degrees

    return decimal_degrees
