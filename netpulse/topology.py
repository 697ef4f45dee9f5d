"""Per-node views for the topology panel."""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from netpulse.models import LinkStatus, Node, PingRecord

SPARKLINE_POINTS = 20
HIGH_LATENCY_MS = 100


class NodeHealth(str, Enum):
    PENDING = "Pending"
    HEALTHY = "Healthy"
    DEGRADED = "Degraded"
    OFFLINE = "Offline"


@dataclass(frozen=True)
class NodeView:
    node: Node
    latest: PingRecord | None
    health: NodeHealth
    sparkline: tuple[int, ...]

    @property
    def label(self) -> str:
        """Short latency label shown on the node card."""
        if self.latest is None:
            return "-- ms"
        if self.health is NodeHealth.OFFLINE:
            return "ERR"
        if self.latest.packet_loss:
            return "LOSS"
        return f"{self.latest.latency_ms} ms"


def node_history(records: Sequence[PingRecord], node_id: str) -> list[PingRecord]:
    return [r for r in records if r.node_id == node_id]


def latest_record(records: Sequence[PingRecord], node_id: str) -> PingRecord | None:
    for record in reversed(records):
        if record.node_id == node_id:
            return record
    return None


def sparkline(history: Sequence[PingRecord], points: int = SPARKLINE_POINTS) -> tuple[int, ...]:
    """Latest latencies for a small trend line; lost samples plot as 0."""
    return tuple(0 if r.packet_loss else r.latency_ms for r in history[-points:])


def node_health(latest: PingRecord | None, high_latency_ms: int = HIGH_LATENCY_MS) -> NodeHealth:
    if latest is None:
        return NodeHealth.PENDING
    if latest.status is LinkStatus.DOWN:
        return NodeHealth.OFFLINE
    if latest.packet_loss or latest.latency_ms > high_latency_ms:
        return NodeHealth.DEGRADED
    return NodeHealth.HEALTHY


def build_node_views(nodes: Sequence[Node], records: Sequence[PingRecord]) -> list[NodeView]:
    """One view per node, in configuration order."""
    views = []
    for node in nodes:
        history = node_history(records, node.id)
        latest = history[-1] if history else None
        views.append(
            NodeView(
                node=node,
                latest=latest,
                health=node_health(latest),
                sparkline=sparkline(history),
            )
        )
    return views
