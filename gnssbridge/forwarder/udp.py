"""UdpForwarder: best-effort UDP multicast sender behind a bounded queue.

Producers call ``enqueue()``, which never blocks: the message is appended
to a FIFO of fixed capacity (30 by default) or, when the queue is full,
dropped with a warning. A single background thread takes messages off the
queue and sends each as one datagram to the multicast group.

Shutdown is cooperative: ``stop()`` clears the running flag, wakes the
sender if it is waiting on an empty queue, and closes the socket. A send
already in progress is not interrupted and may fail with a warning.
"""

import contextlib
import ipaddress
import logging
import queue
import socket
import threading
from dataclasses import dataclass
from types import TracebackType

from gnssbridge.forwarder.interfaces import InterfaceSelector, select_hotspot_interface

__all__ = ["ForwarderStats", "UdpForwarder"]

logger = logging.getLogger(__name__)

_CAPACITY = 30
_MULTICAST_TTL = 255
_STOP_TIMEOUT = 1.0
_ENCODING = "ascii"

# Wakes the sender on stop; never equal to a queued message
_STOP = object()


@dataclass(frozen=True)
class ForwarderStats:
    """Snapshot of forwarder counters.

    Attributes:
        queued: Messages accepted by ``enqueue()``.
        dropped: Messages rejected because the queue was full or the
            forwarder was stopped.
        sent: Datagrams handed to the socket successfully.
        failed: Datagrams whose send raised an error.
        pending: Messages currently waiting in the queue.
        interface: Name of the interface selected for multicast, or None
            when the default route is used.
    """

    queued: int
    dropped: int
    sent: int
    failed: int
    pending: int
    interface: str | None


def _open_multicast_socket(ttl: int, loopback: bool) -> socket.socket:
    """Create a UDP socket configured for multicast sending.

    Raises:
        OSError: If the socket cannot be created or configured.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, ttl)
        sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, int(loopback))
    except OSError:
        sock.close()
        raise
    return sock


class UdpForwarder:
    """Queue messages and send them as UDP multicast datagrams.

    The socket is configured and the sender thread started on
    construction; there is no partially constructed forwarder. Use as a
    context manager, or call ``stop()`` when done::

        with UdpForwarder("239.255.49.2", 49002) as forwarder:
            forwarder.enqueue("XGPS,48.1173000,11.5166667,545.4,11.52,84.4,3,45319")

    Args:
        group: Destination IPv4 address, normally a multicast group.
        port: Destination UDP port.
        interface_selector: Picks the outbound interface; None return
            values fall back to the default route (default:
            ``select_hotspot_interface``).
        ttl: Multicast time-to-live (default: ``255``).
        loopback: Deliver datagrams to listeners on this host as well
            (default: ``True``).
        capacity: Maximum number of queued messages (default: ``30``).

    Raises:
        ValueError: If *group* is not an IPv4 address or *capacity* < 1.
        OSError: If the socket cannot be created or configured.
    """

    def __init__(
        self,
        group: str,
        port: int,
        *,
        interface_selector: InterfaceSelector = select_hotspot_interface,
        ttl: int = _MULTICAST_TTL,
        loopback: bool = True,
        capacity: int = _CAPACITY,
    ) -> None:
        ipaddress.IPv4Address(group)
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")

        self._address = (group, port)
        self._queue: queue.Queue[object] = queue.Queue(maxsize=capacity)
        self._running = threading.Event()
        self._queued = 0
        self._dropped = 0
        self._sent = 0
        self._failed = 0

        self._sock = _open_multicast_socket(ttl, loopback)
        try:
            self._interface = self._select_interface(interface_selector)
        except BaseException:
            self._sock.close()
            raise

        self._running.set()
        self._thread = threading.Thread(
            target=self._run, name="udp-forwarder", daemon=True
        )
        self._thread.start()
        logger.info("Multicast configured for %s:%d", group, port)

    def __enter__(self) -> "UdpForwarder":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.stop()

    @property
    def is_running(self) -> bool:
        return self._running.is_set()

    @property
    def stats(self) -> ForwarderStats:
        return ForwarderStats(
            queued=self._queued,
            dropped=self._dropped,
            sent=self._sent,
            failed=self._failed,
            pending=self._queue.qsize(),
            interface=self._interface,
        )

    def _select_interface(self, selector: InterfaceSelector) -> str | None:
        """Point multicast output at the selected interface, if any."""
        interface = selector()
        if interface is None:
            logger.warning("Could not find WiFi hotspot interface, using default")
            return None
        try:
            self._sock.setsockopt(
                socket.IPPROTO_IP,
                socket.IP_MULTICAST_IF,
                socket.inet_aton(interface.address),
            )
        except OSError as e:
            logger.warning("Could not set network interface %s: %s", interface.name, e)
            return None
        logger.info("Bound to interface: %s", interface.name)
        return interface.name

    def enqueue(self, message: str) -> bool:
        """Queue *message* for sending without blocking.

        Returns:
            True if the message was queued, False if it was dropped because
            it is not a string, the queue is full or the forwarder has been
            stopped.
        """
        if not isinstance(message, str):
            self._dropped += 1
            logger.warning("Failed to send: message is not a string: %r", message)
            return False
        if not self._running.is_set():
            self._dropped += 1
            logger.warning("Failed to send: forwarder stopped")
            return False
        try:
            self._queue.put_nowait(message)
        except queue.Full:
            self._dropped += 1
            logger.warning("Failed to send: network queue full")
            return False
        self._queued += 1
        return True

    def _send(self, message: str) -> None:
        try:
            self._sock.sendto(message.encode(_ENCODING), self._address)
        except (OSError, UnicodeError) as e:
            self._failed += 1
            logger.warning("Multicast send error: %s", e)
            return
        self._sent += 1

    def _run(self) -> None:
        while self._running.is_set():
            message = self._queue.get()
            if message is _STOP:
                break
            self._send(message)

    def stop(self, timeout: float = _STOP_TIMEOUT) -> None:
        """Stop the sender thread and close the socket.

        Safe to call more than once. Messages still queued are discarded.

        Args:
            timeout: Seconds to wait for the sender thread to finish its
                current send before the socket is closed.
        """
        if not self._running.is_set():
            return
        self._running.clear()
        # A full queue means the sender is not blocked in get()
        with contextlib.suppress(queue.Full):
            self._queue.put_nowait(_STOP)
        self._thread.join(timeout)
        self._sock.close()
        logger.info("Multicast forwarder stopped")
