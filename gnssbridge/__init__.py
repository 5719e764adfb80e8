"""gnssbridge: forward NMEA 0183 fixes as XGPS over UDP multicast."""

from gnssbridge.fix import (
    CompositeFix,
    FixAccumulator,
    InactivityTimeoutPolicy,
    MonotonicTimePolicy,
    encode_xgps,
)
from gnssbridge.forwarder import (
    ForwarderStats,
    NetworkInterface,
    UdpForwarder,
    select_hotspot_interface,
    select_interface_by_name,
)
from gnssbridge.gpsd import NmeaReader
from gnssbridge.nmea import (
    GGAData,
    GSAData,
    RMCData,
    SentenceType,
    parse_gga,
    parse_gsa,
    parse_rmc,
    parse_sentence,
)

__all__ = [
    "CompositeFix",
    "FixAccumulator",
    "ForwarderStats",
    "GGAData",
    "GSAData",
    "InactivityTimeoutPolicy",
    "MonotonicTimePolicy",
    "NetworkInterface",
    "NmeaReader",
    "RMCData",
    "SentenceType",
    "UdpForwarder",
    "encode_xgps",
    "parse_gga",
    "parse_gsa",
    "parse_rmc",
    "parse_sentence",
    "select_hotspot_interface",
    "select_interface_by_name",
]
