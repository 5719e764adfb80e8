"""Sentence classification and tokenization.

Every NMEA 0183 sentence starts with the '$' marker followed by a
5-character address field: a 2-character talker ID and a 3-character
sentence type code.

    $GPRMC,123519,A,4807.038,N,01131.000,E,022.4,084.4,230394,003.1,W*6A
    ^^ ^^^
    || +-- sentence type code (fixed offset 3..5)
    |+-- talker ID (GP, GN, GL, ...)
    +-- sentence marker

Only the type code is used for classification, so any talker is accepted.
The checksum suffix is cut off but not verified.
"""

import enum
from dataclasses import dataclass

_SENTENCE_MARKER = "$"
_CHECKSUM_DELIMITER = "*"
_FIELD_SEPARATOR = ","

# "$" + 2-character talker ID + 3-character type code
_MINIMUM_HEADER_LENGTH = 6
_TYPE_CODE_SLICE = slice(3, 6)


class SentenceType(enum.Enum):
    """Sentence types understood by the fix accumulator."""

    RMC = "RMC"
    GGA = "GGA"
    GSA = "GSA"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class RawSentence:
    """One classified and tokenized NMEA line.

    Attributes:
        sentence_type: Classification from the type code, UNKNOWN for any
            sentence the accumulator does not handle.

        fields: Comma-separated fields in order, including empty ones.
            ``fields[0]`` is the address field (e.g. ``"$GPRMC"``) so that
            field indices match the usual NMEA numbering.
    """

    sentence_type: SentenceType
    fields: tuple[str, ...]


def classify(line: str | None) -> SentenceType | None:
    """Classify a line by its sentence type code.

    Returns:
        The sentence type, or None if the line is absent, shorter than the
        sentence header, or does not start with the '$' marker.

    Example:
        >>> classify("$GNGGA,123519.00,...")
        <SentenceType.GGA: 'GGA'>
        >>> classify("$GPVTG,054.7,T,...")
        <SentenceType.UNKNOWN: 'UNKNOWN'>
        >>> classify("GPGGA,123519")
        None
    """
    if not line:
        return None
    line = line.rstrip()
    if len(line) < _MINIMUM_HEADER_LENGTH or not line.startswith(_SENTENCE_MARKER):
        return None

    try:
        return SentenceType(line[_TYPE_CODE_SLICE])
    except ValueError:
        return SentenceType.UNKNOWN


def tokenize(line: str) -> tuple[str, ...]:
    """Split a sentence into its fields, dropping the checksum suffix."""
    body = line.rstrip().split(_CHECKSUM_DELIMITER, 1)[0]
    return tuple(body.split(_FIELD_SEPARATOR))


def parse_sentence(line: str | None) -> RawSentence | None:
    """Classify and tokenize one NMEA line.

    Returns:
        RawSentence, or None if the line was rejected by ``classify``.
        Unrecognized sentence types are returned with ``UNKNOWN`` so the
        caller decides whether to ignore them.
    """
    sentence_type = classify(line)
    if sentence_type is None or line is None:
        return None
    return RawSentence(sentence_type=sentence_type, fields=tokenize(line))
