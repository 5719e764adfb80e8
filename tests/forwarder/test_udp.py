"""Tests for the UDP multicast forwarder."""

import logging
import socket
import threading
import time
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from gnssbridge.forwarder import NetworkInterface, UdpForwarder

_GROUP = "239.255.49.2"
_PORT = 49002


def _no_interface() -> None:
    return None


def _wait_until(predicate, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def mock_socket(monkeypatch):
    """Replace socket.socket with a factory returning a MagicMock.

    Returns a SimpleNamespace with attributes:
        sock    -- the socket instance mock
        factory -- the socket.socket replacement (to verify call args)
    """
    mock_sock = MagicMock()
    mock_factory = MagicMock(return_value=mock_sock)
    monkeypatch.setattr(socket, "socket", mock_factory)
    return SimpleNamespace(sock=mock_sock, factory=mock_factory)


def _sent_payloads(mock_sock: MagicMock) -> list[bytes]:
    return [c.args[0] for c in mock_sock.sendto.call_args_list]


class TestUdpForwarderSetup:
    def test_socket_is_udp_ipv4(self, mock_socket):
        with UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface):
            pass
        mock_socket.factory.assert_called_once_with(
            socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP
        )

    def test_ttl_is_maximum_and_loopback_enabled(self, mock_socket):
        with UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface):
            pass
        mock_socket.sock.setsockopt.assert_any_call(
            socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 255
        )
        mock_socket.sock.setsockopt.assert_any_call(
            socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 1
        )

    def test_selected_interface_is_bound(self, mock_socket):
        def _select():
            return NetworkInterface("wlan0", "192.168.43.1")

        with UdpForwarder(_GROUP, _PORT, interface_selector=_select) as forwarder:
            assert forwarder.stats.interface == "wlan0"
        mock_socket.sock.setsockopt.assert_any_call(
            socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton("192.168.43.1")
        )

    def test_default_route_when_no_interface(self, mock_socket, caplog):
        with caplog.at_level(logging.WARNING):
            with UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface) as forwarder:
                assert forwarder.stats.interface is None
        assert "using default" in caplog.text

    def test_interface_option_failure_falls_back(self, mock_socket):
        def _setsockopt(level, option, value):
            if option == socket.IP_MULTICAST_IF:
                raise OSError("no such device")

        mock_socket.sock.setsockopt.side_effect = _setsockopt
        with UdpForwarder(
            _GROUP,
            _PORT,
            interface_selector=lambda: NetworkInterface("wlan0", "192.168.43.1"),
        ) as forwarder:
            assert forwarder.is_running
            assert forwarder.stats.interface is None

    def test_socket_creation_failure_is_raised(self, mock_socket):
        mock_socket.factory.side_effect = OSError("no sockets")
        with pytest.raises(OSError, match="no sockets"):
            UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface)

    def test_socket_closed_if_configuration_fails(self, mock_socket):
        mock_socket.sock.setsockopt.side_effect = OSError("protocol not available")
        with pytest.raises(OSError):
            UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface)
        mock_socket.sock.close.assert_called_once()

    def test_invalid_group_is_rejected(self, mock_socket):
        with pytest.raises(ValueError):
            UdpForwarder("not-an-address", _PORT, interface_selector=_no_interface)
        mock_socket.factory.assert_not_called()


class TestUdpForwarderSend:
    def test_sends_one_datagram_per_message(self, mock_socket):
        with UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface) as forwarder:
            assert forwarder.enqueue("XGPS,1") is True
            assert forwarder.enqueue("XGPS,2") is True
            assert _wait_until(lambda: forwarder.stats.sent == 2)
        mock_socket.sock.sendto.assert_any_call(b"XGPS,1", (_GROUP, _PORT))
        assert _sent_payloads(mock_socket.sock) == [b"XGPS,1", b"XGPS,2"]

    def test_send_failure_does_not_stop_worker(self, mock_socket, caplog):
        mock_socket.sock.sendto.side_effect = [OSError("network unreachable"), 6]
        with caplog.at_level(logging.WARNING):
            with UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface) as forwarder:
                forwarder.enqueue("XGPS,1")
                forwarder.enqueue("XGPS,2")
                assert _wait_until(lambda: forwarder.stats.sent == 1)
                assert forwarder.stats.failed == 1
        assert "Multicast send error" in caplog.text
        assert _sent_payloads(mock_socket.sock) == [b"XGPS,1", b"XGPS,2"]

    def test_non_ascii_message_fails_without_stopping_worker(self, mock_socket, caplog):
        with caplog.at_level(logging.WARNING):
            with UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface) as forwarder:
                forwarder.enqueue("XGPS,é")
                forwarder.enqueue("XGPS,1")
                assert _wait_until(lambda: forwarder.stats.sent == 1)
                assert forwarder.stats.failed == 1
        assert "Multicast send error" in caplog.text
        assert _sent_payloads(mock_socket.sock) == [b"XGPS,1"]

    def test_none_is_dropped_and_worker_keeps_sending(self, mock_socket, caplog):
        with caplog.at_level(logging.WARNING):
            with UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface) as forwarder:
                assert forwarder.enqueue(None) is False
                assert forwarder.enqueue("XGPS,1") is True
                assert _wait_until(lambda: forwarder.stats.sent == 1)
                assert forwarder.is_running is True
                assert forwarder.stats.dropped == 1
        assert "not a string" in caplog.text
        assert _sent_payloads(mock_socket.sock) == [b"XGPS,1"]

    def test_full_queue_drops_newest_and_keeps_fifo(self, mock_socket, caplog):
        entered = threading.Event()
        release = threading.Event()

        def _blocking_send(data, address):
            entered.set()
            release.wait(timeout=5.0)
            return len(data)

        mock_socket.sock.sendto.side_effect = _blocking_send
        with UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface) as forwarder:
            forwarder.enqueue("in-flight")
            assert entered.wait(timeout=2.0)

            accepted = [forwarder.enqueue(f"m{i}") for i in range(30)]
            with caplog.at_level(logging.WARNING):
                assert forwarder.enqueue("overflow") is False
            assert all(accepted)
            assert forwarder.stats.dropped == 1
            assert forwarder.stats.pending == 30

            release.set()
            assert _wait_until(lambda: forwarder.stats.sent == 31)

        assert "network queue full" in caplog.text
        expected = [b"in-flight"] + [f"m{i}".encode() for i in range(30)]
        assert _sent_payloads(mock_socket.sock) == expected


class TestUdpForwarderStop:
    def test_stop_wakes_idle_worker_and_closes_socket(self, mock_socket):
        forwarder = UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface)
        forwarder.stop()
        assert forwarder.is_running is False
        assert forwarder._thread.is_alive() is False
        mock_socket.sock.close.assert_called_once()

    def test_stop_is_idempotent(self, mock_socket):
        forwarder = UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface)
        forwarder.stop()
        forwarder.stop()
        mock_socket.sock.close.assert_called_once()

    def test_enqueue_after_stop_is_dropped(self, mock_socket):
        forwarder = UdpForwarder(_GROUP, _PORT, interface_selector=_no_interface)
        forwarder.stop()
        assert forwarder.enqueue("XGPS,1") is False
        assert forwarder.stats.dropped == 1
        mock_socket.sock.sendto.assert_not_called()


class TestUdpForwarderLoopback:
    def test_datagram_reaches_local_listener(self):
        receiver = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        receiver.bind(("127.0.0.1", 0))
        receiver.settimeout(2.0)
        port = receiver.getsockname()[1]
        try:
            with UdpForwarder("127.0.0.1", port, interface_selector=_no_interface) as forwarder:
                forwarder.enqueue("XGPS,48.1173000,11.5166667,545.4,11.52,84.4,3,45319")
                payload, _ = receiver.recvfrom(1024)
        finally:
            receiver.close()
        assert payload == b"XGPS,48.1173000,11.5166667,545.4,11.52,84.4,3,45319"
