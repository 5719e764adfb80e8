"""Pytest fixtures for server module testing."""

import queue
import threading
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from gnssbridge.forwarder import ForwarderStats


class RecordingForwarder:
    """Stands in for ``UdpForwarder``; records messages instead of sending."""

    def __init__(self, group: str, port: int, **_: object) -> None:
        self.group = group
        self.port = port
        self.messages: list[str] = []
        self.stopped = False
        self.received = threading.Event()

    def __enter__(self) -> "RecordingForwarder":
        return self

    def __exit__(self, *_: object) -> None:
        self.stop()

    @property
    def is_running(self) -> bool:
        return not self.stopped

    @property
    def stats(self) -> ForwarderStats:
        return ForwarderStats(
            queued=len(self.messages),
            dropped=0,
            sent=len(self.messages),
            failed=0,
            pending=0,
            interface=None,
        )

    def enqueue(self, message: str) -> bool:
        self.messages.append(message)
        self.received.set()
        return True

    def stop(self) -> None:
        self.stopped = True


class ControlledNmeaReader:
    """Stands in for ``NmeaReader``; yields sentences put on its queue."""

    def __init__(self, *_: object) -> None:
        self.message_queue: queue.Queue[str | None] = queue.Queue()
        self.cancelled = False

    def __enter__(self) -> "ControlledNmeaReader":
        return self

    def __exit__(self, *_: object) -> None:
        pass

    def cancel(self) -> None:
        self.cancelled = True
        self.message_queue.put(None)

    def __iter__(self) -> Iterator[str]:
        while True:
            item = self.message_queue.get()
            if item is None:
                raise EOFError("cancelled")
            yield item


class _Created:
    def __init__(self) -> None:
        self.forwarders: list[RecordingForwarder] = []
        self.readers: list[ControlledNmeaReader] = []

    def forwarder(self, *args: object, **kwargs: object) -> RecordingForwarder:
        instance = RecordingForwarder(*args, **kwargs)  # type: ignore[arg-type]
        self.forwarders.append(instance)
        return instance

    def reader(self, *args: object) -> ControlledNmeaReader:
        instance = ControlledNmeaReader(*args)
        self.readers.append(instance)
        return instance


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "XGPS_GROUP",
        "XGPS_PORT",
        "XGPS_INTERFACE",
        "XGPS_POLICY",
        "XGPS_GPSD_ENABLED",
        "XGPS_GPSD_HOST",
        "XGPS_GPSD_PORT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def created() -> Iterator[_Created]:
    tracker = _Created()
    with (
        patch("server.main.UdpForwarder", side_effect=tracker.forwarder),
        patch("server.main.NmeaReader", side_effect=tracker.reader),
    ):
        yield tracker
