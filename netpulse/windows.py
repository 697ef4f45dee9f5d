"""Windowed views over a session's ping records.

Every view is recomputed from the append-only record store on each tick:

- live window: trailing 60 seconds, feeds the live quality score
- session window: the whole run, feeds the session score
- chart series: per-tick buckets keyed by node id, for the latency timeline
- anomalies: most recent high-latency or lost records, for the event log
"""

from typing import Callable, Sequence

from netpulse.models import PingRecord
from netpulse.timefmt import format_clock

LIVE_WINDOW_MS = 60_000
MAX_CHART_BUCKETS = 60
RECORDS_PER_NODE = 120
ANOMALY_LIMIT = 5
ANOMALY_LATENCY_MS = 150


def live_window(
    records: Sequence[PingRecord], now: int, window_ms: int = LIVE_WINDOW_MS
) -> list[PingRecord]:
    """Records strictly newer than ``now - window_ms``."""
    cutoff = now - window_ms
    return [r for r in records if r.timestamp > cutoff]


def session_window(records: Sequence[PingRecord]) -> tuple[PingRecord, ...]:
    return tuple(records)


def chart_series(
    records: Sequence[PingRecord],
    node_count: int,
    formatter: Callable[[int], str] = format_clock,
    max_buckets: int = MAX_CHART_BUCKETS,
    records_per_node: int = RECORDS_PER_NODE,
) -> list[dict]:
    """Group records into per-timestamp chart points.

    Each point is ``{"timestamp", "formatted_time", <node_id>: latency}`` with
    ``None`` for lost samples. Only the newest ``node_count * records_per_node``
    records are considered, and the newest ``max_buckets`` points returned.

    Args:
        records: Session records in insertion (time) order
        node_count: Number of configured nodes
        formatter: Renders a bucket timestamp for the axis label
        max_buckets: Maximum number of points returned
        records_per_node: Raw input cap per node

    Returns:
        List of points sorted by timestamp ascending
    """
    limit = node_count * records_per_node
    if limit <= 0 or not records:
        return []
    recent = records[-limit:]

    buckets = {}
    for record in recent:
        point = buckets.get(record.timestamp)
        if point is None:
            point = {"timestamp": record.timestamp, "formatted_time": formatter(record.timestamp)}
            buckets[record.timestamp] = point
        point[record.node_id] = None if record.packet_loss else record.latency_ms

    points = sorted(buckets.values(), key=lambda p: p["timestamp"])
    return points[-max_buckets:]


def is_anomaly(record: PingRecord, latency_threshold_ms: int = ANOMALY_LATENCY_MS) -> bool:
    return record.packet_loss or record.latency_ms > latency_threshold_ms


def anomalies(
    records: Sequence[PingRecord],
    limit: int = ANOMALY_LIMIT,
    latency_threshold_ms: int = ANOMALY_LATENCY_MS,
) -> list[PingRecord]:
    """Most recent flagged records, newest first."""
    flagged = [r for r in records if is_anomaly(r, latency_threshold_ms)]
    if limit <= 0:
        return []
    return list(reversed(flagged[-limit:]))
