"""gpsd client supplying raw NMEA sentences."""

from gnssbridge.gpsd.reader import NmeaReader

__all__ = ["NmeaReader"]
