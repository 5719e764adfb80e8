"""Feeding NMEA sentences through an accumulator into the forwarder."""

import logging
from collections.abc import Iterable

from gnssbridge.fix import FixAccumulator
from gnssbridge.forwarder import UdpForwarder
from gnssbridge.gpsd import NmeaReader

__all__ = ["forward_sentences", "run_gpsd_loop"]

logger = logging.getLogger(__name__)


def forward_sentences(
    sentences: Iterable[str],
    accumulator: FixAccumulator,
    forwarder: UdpForwarder,
) -> list[str]:
    """Feed *sentences* in order and enqueue every emitted XGPS message.

    Returns:
        The emitted messages, in order, whether or not the forwarder
        accepted them.
    """
    emitted = []
    for sentence in sentences:
        message = accumulator.on_nmea(sentence)
        if message is None:
            continue
        forwarder.enqueue(message)
        emitted.append(message)
    return emitted


def run_gpsd_loop(
    reader: NmeaReader,
    accumulator: FixAccumulator,
    forwarder: UdpForwarder,
) -> None:
    """Forward sentences from gpsd until the reader is cancelled.

    The caller owns *reader* and must use it as an open context manager. The
    loop exits when ``reader.cancel()`` is called, which causes the underlying
    ``NmeaReader.read()`` to raise ``EOFError``.

    Args:
        reader: An open ``NmeaReader`` instance managed by the caller.
        accumulator: Accumulator dedicated to this sentence source.
        forwarder: Forwarder receiving the emitted messages.
    """
    try:
        for sentence in reader:
            forward_sentences((sentence,), accumulator, forwarder)
    except EOFError:
        logger.info("gpsd stream closed")
        return
