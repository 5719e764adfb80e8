"""NmeaReader: gpsd client streaming raw NMEA sentences.

Connects to a local gpsd instance over TCP (localhost:2947) and enables
raw NMEA passthrough, so the bridge can coexist with other gpsd clients
(chrony, gpsmon) instead of claiming the receiver's serial port.

Reading strategy:
    With ``"nmea":true`` gpsd relays every sentence from the receiver
    verbatim, one per line. It still emits a few JSON status objects
    (VERSION, DEVICES, WATCH) when the watch starts; those begin with
    ``{`` and are skipped, as is anything else not starting with ``$``.
"""

import contextlib
import socket
from collections.abc import Iterator
from types import TracebackType
from typing import IO, Any

__all__ = ["NmeaReader"]

# --- gpsd connection defaults -------------------------------------------------

_HOST = "localhost"
_PORT = 2947
_TIMEOUT = 2.0  # socket read timeout; determines maximum cancel() latency

_WATCH_CMD = b'?WATCH={"enable":true,"nmea":true}\n'
_SENTENCE_MARKER = "$"


class NmeaReader:
    """Context manager for reading NMEA sentences relayed by gpsd.

    Two consumption patterns are supported:

    Continuous iteration (recommended for server backends)::

        with NmeaReader() as reader:
            for sentence in reader:
                accumulator.on_nmea(sentence)

    Single read::

        with NmeaReader() as reader:
            sentence = reader.read()

    Sentences are returned without the trailing line ending.

    Args:
        host: gpsd host (default: ``"localhost"``).
        port: gpsd TCP port (default: ``2947``).
    """

    def __init__(
        self,
        host: str = _HOST,
        port: int = _PORT,
    ) -> None:
        """Store connection parameters; the socket is opened in ``__enter__``."""
        self._host = host
        self._port = port
        self._sock: socket.socket | None = None
        self._stream: IO[Any] | None = None
        self._cancelled: bool = False

    def __enter__(self) -> "NmeaReader":
        """Open the gpsd connection and start the NMEA watch."""
        self._sock = socket.create_connection((self._host, self._port))
        try:
            self._sock.settimeout(_TIMEOUT)
            self._sock.sendall(_WATCH_CMD)
        except OSError:
            self._sock.close()
            self._sock = None
            raise
        self._stream = self._sock.makefile("rb")
        self._cancelled = False
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the gpsd connection."""
        if self._stream is not None:
            self._stream.close()
            self._stream = None
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def cancel(self) -> None:
        """Cancel pending blocking reads gracefully.

        Sets the cancellation flag and shuts down the socket so that any
        in-progress ``readline()`` unblocks immediately and raises
        ``EOFError``, allowing background threads to exit without waiting
        for the next timeout cycle.
        """
        self._cancelled = True
        if self._sock is not None:
            with contextlib.suppress(OSError):
                self._sock.shutdown(socket.SHUT_RDWR)

    def _recv_raw(self, stream: IO[Any]) -> bytes | None:
        """Read one raw line from gpsd; returns ``None`` on timeout retry.

        Raises:
            EOFError: If the stream ended or the connection was closed.
        """
        try:
            raw: bytes = stream.readline()
            if not raw:
                raise EOFError("gpsd stream ended.")
            return raw
        except TimeoutError:
            return None
        except OSError as e:
            raise EOFError("gpsd connection closed.") from e

    def _read_line(self) -> str | None:
        """Read and decode one line; returns ``None`` on timeout retry.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            EOFError: If cancelled, or the stream ended or was closed.
        """
        if self._stream is None:
            raise RuntimeError("NmeaReader must be used as a context manager.")
        if self._cancelled:
            raise EOFError("gpsd read cancelled.")
        raw = self._recv_raw(self._stream)
        if raw is None and self._cancelled:
            raise EOFError("gpsd read cancelled.")
        if raw is None:
            return None
        return raw.decode("ascii", errors="ignore").rstrip()

    def read(self) -> str:
        """Block until the next NMEA sentence arrives and return it.

        Raises:
            RuntimeError: If called outside a ``with`` block.
            EOFError: If the read is cancelled or the stream ends.
        """
        if self._sock is None:
            raise RuntimeError("NmeaReader must be used as a context manager.")
        while True:
            line = self._read_line()
            if line is not None and line.startswith(_SENTENCE_MARKER):
                return line

    def __iter__(self) -> Iterator[str]:
        """Yield NMEA sentences indefinitely.

        Iteration continues until the caller breaks the loop or an exception
        propagates out (e.g. ``EOFError`` on cancellation). ``StopIteration``
        is never raised.
        """
        while True:
            yield self.read()
