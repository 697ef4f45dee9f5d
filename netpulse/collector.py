"""Collector abstraction turning probe results into ping records."""

from typing import Iterable, Protocol

from netpulse.models import Node, PingRecord
from netpulse.probe import ProbeResult, ProbeSimulator


class Prober(Protocol):
    """Protocol defining the interface for probe sources."""

    def simulate(self, address: str) -> ProbeResult:
        """Probe a single address once."""
        ...


def sample_nodes(prober: Prober, nodes: Iterable[Node], timestamp: int) -> list[PingRecord]:
    """Probe every node once and stamp all results with the same timestamp."""
    records = []
    for node in nodes:
        result = prober.simulate(node.address)
        records.append(
            PingRecord(
                timestamp=timestamp,
                node_id=node.id,
                latency_ms=result.latency_ms,
                status=result.status,
                packet_loss=result.packet_loss,
            )
        )
    return records


def default_prober(seed: int | None = None) -> Prober:
    """Return a fresh simulator, seeded when a seed is given."""
    return ProbeSimulator(seed=seed)
