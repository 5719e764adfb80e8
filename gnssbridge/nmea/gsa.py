"""GSA sentence parser.

GSA Sentence Format:
    $GPGSA,A,3,04,05,,09,12,,,24,,,,,2.5,1.3,2.1*39
           | | |                      |   |   |
           | | |                      |   |   +-- VDOP
           | | |                      |   +-- HDOP
           | | |                      +-- PDOP
           | | +-- 12 satellite slots (PRNs used in the fix, may be empty)
           | +-- Fix mode (1=no fix, 2=2D, 3=3D)
           +-- Selection mode (M=manual, A=automatic)
"""

from collections.abc import Sequence

from gnssbridge.nmea.fields import (
    parse_float_field,
    parse_int_field,
    parse_string_field,
)
from gnssbridge.nmea.types import GSAData

_MINIMUM_FIELD_COUNT = 3
_FIRST_SLOT_INDEX = 3
_SLOT_COUNT = 12
_PDOP_INDEX = _FIRST_SLOT_INDEX + _SLOT_COUNT
_NO_FIX = 1


def _optional_float(fields: Sequence[str], index: int) -> float | None:
    if index >= len(fields):
        return None
    return parse_float_field(fields[index])


def _used_satellites(fields: Sequence[str]) -> tuple[str, ...]:
    slots = fields[_FIRST_SLOT_INDEX : _FIRST_SLOT_INDEX + _SLOT_COUNT]
    return tuple(slot for slot in slots if slot)


def parse_gsa(fields: Sequence[str]) -> GSAData | None:
    """Parse the fields of a GSA sentence.

    Sentences truncated after the fix mode are accepted; whichever
    satellite slots and DOP fields are present are read.

    Args:
        fields: Tokenized sentence, address field first

    Returns:
        GSAData, or None if the sentence has fewer than 3 fields

    Example:
        >>> gsa = parse_gsa(tokenize("$GPGSA,A,3,04,05,,09,12,,,24,,,,,2.5,1.3,2.1*39"))
        >>> gsa.fix_mode, gsa.satellites_used
        (3, 5)
    """
    if len(fields) < _MINIMUM_FIELD_COUNT:
        return None

    fix_mode = parse_int_field(fields[2]) or _NO_FIX
    has_fix = fix_mode >= 2

    return GSAData(
        selection_mode=parse_string_field(fields[1]),
        fix_mode=fix_mode,
        satellite_ids=_used_satellites(fields) if has_fix else (),
        position_dilution_of_precision=_optional_float(fields, _PDOP_INDEX),
        horizontal_dilution_of_precision=_optional_float(fields, _PDOP_INDEX + 1),
        vertical_dilution_of_precision=_optional_float(fields, _PDOP_INDEX + 2),
        valid=has_fix,
    )
