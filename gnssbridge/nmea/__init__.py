"""NMEA 0183 parser for RMC, GGA and GSA sentences."""

from gnssbridge.nmea.gga import parse_gga
from gnssbridge.nmea.gsa import parse_gsa
from gnssbridge.nmea.rmc import parse_rmc
from gnssbridge.nmea.sentence import (
    RawSentence,
    SentenceType,
    classify,
    parse_sentence,
    tokenize,
)
from gnssbridge.nmea.types import GGAData, GSAData, RMCData

__all__ = [
    "GGAData",
    "GSAData",
    "RMCData",
    "RawSentence",
    "SentenceType",
    "classify",
    "parse_gga",
    "parse_gsa",
    "parse_rmc",
    "parse_sentence",
    "tokenize",
]
