"""End-of-session report: overall grade, per-node breakdown and CSV export."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Sequence

from netpulse.models import AggregatedStats, Node, Session
from netpulse.stats import aggregate
from netpulse.timefmt import format_datetime

logger = logging.getLogger(__name__)

CSV_HEADER = ["Timestamp", "Node Name", "IP Address", "Latency (ms)", "Status", "Packet Loss"]
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class NodeBreakdown:
    node: Node
    stats: AggregatedStats


@dataclass(frozen=True)
class SessionReport:
    """Aggregated results of a finished (or running) session."""

    session: Session
    overall: AggregatedStats
    nodes: tuple[NodeBreakdown, ...]
    duration_minutes: float


def build_report(session: Session, nodes: Sequence[Node], now: int | None = None) -> SessionReport:
    """Aggregate the whole session and each node independently.

    Args:
        session: Session to report on
        nodes: Configured nodes, in display order
        now: End time used for an open session (default: current time)
    """
    end_time = session.end_time
    if end_time is None:
        end_time = now if now is not None else int(time.time() * 1000)

    breakdown = tuple(
        NodeBreakdown(node=node, stats=aggregate(r for r in session.records if r.node_id == node.id))
        for node in nodes
    )
    return SessionReport(
        session=session,
        overall=aggregate(session.records),
        nodes=breakdown,
        duration_minutes=(end_time - session.start_time) / 1000 / 60,
    )


def session_to_csv(
    session: Session,
    nodes: Sequence[Node],
    formatter: Callable[[int], str] = format_datetime,
) -> str:
    """Render session records as CSV, one line per record.

    Fields are joined with commas as-is, without quoting.
    """
    by_id = {node.id: node for node in nodes}
    lines = [",".join(CSV_HEADER)]
    for record in session.records:
        node = by_id.get(record.node_id)
        lines.append(
            ",".join(
                [
                    formatter(record.timestamp),
                    node.name if node else UNKNOWN,
                    node.address if node else UNKNOWN,
                    str(record.latency_ms),
                    record.status.value,
                    "Yes" if record.packet_loss else "No",
                ]
            )
        )
    return "\n".join(lines)


def default_csv_filename(session: Session) -> str:
    started = datetime.fromtimestamp(session.start_time / 1000, timezone.utc)
    return f"network_report_{started.strftime('%Y%m%dT%H%M%SZ')}.csv"


def write_session_csv(
    session: Session,
    nodes: Sequence[Node],
    path: Path,
    formatter: Callable[[int], str] = format_datetime,
) -> Path:
    """Write the session CSV to ``path``; a directory gets the default file name."""
    path = Path(path)
    if path.is_dir():
        path = path / default_csv_filename(session)
    elif path.suffix.lower() != ".csv":
        path = path.with_name(path.name + ".csv")

    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(session_to_csv(session, nodes, formatter))
        f.write("\n")

    logger.info("Exported %d records to %s", len(session.records), path)
    return path
