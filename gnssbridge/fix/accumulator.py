"""Fix accumulator: merge RMC, GGA and GSA sentences into XGPS messages.

A receiver reports one navigation epoch as a burst of sentences, each
carrying part of the solution:

    RMC  time, position, speed, course, validity
    GGA  time, position, altitude, fix quality
    GSA  fix mode (none/2D/3D), satellites used

The accumulator keeps a single ``CompositeFix`` and, after every accepted
sentence, asks its readiness policy whether the merged state is a new fix
worth emitting. Sentences are fed one at a time from a single context;
the accumulator is not thread-safe.
"""

import logging

from gnssbridge.fix.policies import MonotonicTimePolicy, ReadinessPolicy
from gnssbridge.fix.types import CompositeFix
from gnssbridge.fix.xgps import encode_xgps
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
from gnssbridge.nmea.sentence import RawSentence

__all__ = ["FixAccumulator"]

logger = logging.getLogger(__name__)


class FixAccumulator:
    """Stateful merger of NMEA sentences into XGPS messages.

    Typical use, one accumulator per sentence source::

        accumulator = FixAccumulator()
        for line in source:
            message = accumulator.on_nmea(line)
            if message is not None:
                forwarder.enqueue(message)

    Args:
        policy: Readiness policy (default: ``MonotonicTimePolicy``).
    """

    def __init__(self, policy: ReadinessPolicy | None = None) -> None:
        self._policy: ReadinessPolicy = (
            policy if policy is not None else MonotonicTimePolicy()
        )
        self._fix = CompositeFix()

    @property
    def fix(self) -> CompositeFix:
        """The composite fix owned by this accumulator."""
        return self._fix

    def reset(self) -> None:
        """Start a new accumulation epoch.

        Clears the RMC/GGA observed flags and the emission watermark. The
        last known position and measurements are kept.
        """
        self._fix.rmc_observed = False
        self._fix.gga_observed = False
        self._fix.last_emitted_ms = -1
        self._policy.reset()

    def on_nmea(self, line: str | None) -> str | None:
        """Feed one sentence; return an XGPS message if a new fix is ready.

        Lines that are not RMC, GGA or GSA sentences, and sentences with
        too few fields, are ignored without touching the state.

        Args:
            line: One complete NMEA sentence, with or without line ending.

        Returns:
            The XGPS message for a newly completed fix, otherwise None.
        """
        sentence = parse_sentence(line)
        if sentence is None or sentence.sentence_type is SentenceType.UNKNOWN:
            return None

        if not self._apply(sentence):
            logger.debug("Ignored sentence: %r", line)
            return None

        if not self._policy.try_emit(self._fix):
            return None

        return encode_xgps(self._fix)

    def _apply(self, sentence: RawSentence) -> bool:
        """Parse and merge one sentence; return False if it was rejected."""
        if sentence.sentence_type is SentenceType.RMC:
            rmc = parse_rmc(sentence.fields)
            if rmc is None or not rmc.valid:
                return False
            self._policy.on_sentence(self._fix)
            self._merge_rmc(rmc)
        elif sentence.sentence_type is SentenceType.GGA:
            gga = parse_gga(sentence.fields)
            if gga is None:
                return False
            self._policy.on_sentence(self._fix)
            self._merge_gga(gga)
        else:
            gsa = parse_gsa(sentence.fields)
            if gsa is None:
                return False
            self._policy.on_sentence(self._fix)
            self._merge_gsa(gsa)
        return True

    def _merge_rmc(self, rmc: RMCData) -> None:
        fix = self._fix
        fix.fix_time_ms = rmc.utc_time_ms
        fix.latitude_degrees = rmc.latitude_degrees
        fix.longitude_degrees = rmc.longitude_degrees
        fix.speed_meters_per_second = rmc.speed_meters_per_second
        fix.course_degrees = rmc.course_degrees
        fix.rmc_observed = True

    def _merge_gga(self, gga: GGAData) -> None:
        fix = self._fix
        fix.fix_time_ms = gga.utc_time_ms
        fix.latitude_degrees = gga.latitude_degrees
        fix.longitude_degrees = gga.longitude_degrees
        fix.altitude_meters = gga.altitude_meters
        fix.fix_quality = gga.fix_quality
        fix.gga_observed = True

    def _merge_gsa(self, gsa: GSAData) -> None:
        fix = self._fix
        fix.fix_mode = gsa.fix_mode
        if not gsa.valid:
            fix.satellites_used = 0
            return
        fix.satellites_used = max(fix.satellites_used, gsa.satellites_used)
