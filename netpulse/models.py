"""Data models for NetPulse nodes, ping records and session statistics."""

from dataclasses import dataclass
from enum import Enum


class NodeCategory(str, Enum):
    """Role of a monitored hop in the path topology."""

    LOCAL = "Local"
    GATEWAY = "Gateway"
    WAN = "WAN"
    SERVICE = "Service"


class LinkStatus(str, Enum):
    """Up/down state reported by a single probe."""

    UP = "Up"
    DOWN = "Down"


class QualityGrade(str, Enum):
    """Categorical label derived from a 0-100 quality score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


@dataclass(frozen=True)
class Node:
    """A network endpoint being monitored."""

    id: str
    name: str
    address: str
    category: NodeCategory = NodeCategory.WAN


@dataclass(frozen=True)
class PingRecord:
    """A single probe result for one node at one tick."""

    timestamp: int  # wall clock, milliseconds
    node_id: str
    latency_ms: int
    status: LinkStatus = LinkStatus.UP
    packet_loss: bool = False

    def __post_init__(self):
        """Keep status, loss and latency consistent."""
        if self.latency_ms < 0:
            raise ValueError(f"latency_ms must be >= 0, got {self.latency_ms}")
        if self.status is LinkStatus.DOWN and not self.packet_loss:
            object.__setattr__(self, "packet_loss", True)
        if self.packet_loss and self.latency_ms != 0:
            object.__setattr__(self, "latency_ms", 0)

    @property
    def is_valid(self) -> bool:
        """True when the record carries a usable latency sample."""
        return not self.packet_loss and self.status is LinkStatus.UP


@dataclass(frozen=True)
class AggregatedStats:
    """Quality statistics over a sequence of ping records."""

    avg_latency_ms: int
    max_latency_ms: int
    jitter_ms: int
    packet_loss_rate_pct: float
    score: int
    status: QualityGrade


@dataclass(frozen=True)
class Session:
    """One monitoring run bounded by start and stop."""

    id: str
    start_time: int
    end_time: int | None
    records: tuple[PingRecord, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.end_time is None
