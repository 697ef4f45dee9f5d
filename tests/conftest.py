"""Shared fixtures for NetPulse tests."""

import os

import pytest

# Qt widgets need a platform plugin; run headless
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from netpulse.models import LinkStatus, Node, NodeCategory, PingRecord  # noqa: E402


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1000):
        self.now += ms


class ScriptedRandom:
    """Random source returning a fixed sequence of values, then a default."""

    def __init__(self, values, default: float = 0.99):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


def ok(latency, ts=0, node_id="n1"):
    return PingRecord(timestamp=ts, node_id=node_id, latency_ms=latency)


def lost(ts=0, node_id="n1"):
    return PingRecord(timestamp=ts, node_id=node_id, latency_ms=0, packet_loss=True)


def down(ts=0, node_id="n1"):
    return PingRecord(timestamp=ts, node_id=node_id, latency_ms=0, status=LinkStatus.DOWN, packet_loss=True)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def nodes():
    return (
        Node("1", "Loopback", "127.0.0.1", NodeCategory.LOCAL),
        Node("2", "Gateway", "192.168.1.1", NodeCategory.GATEWAY),
        Node("3", "Google DNS", "8.8.8.8", NodeCategory.WAN),
    )


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
