"""Session controller: owns the record store and drives start/tick/stop."""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

from netpulse.collector import Prober, default_prober, sample_nodes
from netpulse.config import validate_nodes
from netpulse.models import AggregatedStats, Node, PingRecord, Session
from netpulse.report import SessionReport, build_report
from netpulse.stats import BASELINE_STATS, aggregate
from netpulse.timefmt import format_clock
from netpulse.windows import LIVE_WINDOW_MS, anomalies, chart_series, live_window

logger = logging.getLogger(__name__)


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class SessionPhase(str, Enum):
    IDLE = "Idle"
    MONITORING = "Monitoring"
    SUMMARY = "Summary"


class SessionStateError(RuntimeError):
    """Raised when an operation is not allowed in the current phase."""


@dataclass
class SessionState:
    """All mutable monitoring state, owned by one SessionController."""

    nodes: tuple[Node, ...] = ()
    phase: SessionPhase = SessionPhase.IDLE
    start_time: int | None = None
    end_time: int | None = None
    records: list[PingRecord] = field(default_factory=list)
    live_stats: AggregatedStats = BASELINE_STATS
    session_stats: AggregatedStats = BASELINE_STATS

    def to_session(self) -> Session:
        if self.start_time is None:
            raise SessionStateError("No session has been started")
        return Session(
            id=str(self.start_time),
            start_time=self.start_time,
            end_time=self.end_time,
            records=tuple(self.records),
        )


@dataclass(frozen=True)
class MonitorSnapshot:
    """Read-only view of the engine after a tick."""

    timestamp: int
    phase: SessionPhase
    live_stats: AggregatedStats
    session_stats: AggregatedStats
    chart: tuple[dict, ...]
    anomalies: tuple[PingRecord, ...]
    record_count: int


class SessionController:
    """Runs monitoring sessions over a fixed node list.

    Phases: Idle -> Monitoring -> Summary -> Idle. Nodes can only be changed
    while Idle. Ticks are serialized by an internal lock, so a tick arriving
    while another is still running waits for it to finish.
    """

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        prober: Prober | None = None,
        clock: Callable[[], int] | None = None,
        state: SessionState | None = None,
        live_window_ms: int = LIVE_WINDOW_MS,
        formatter: Callable[[int], str] = format_clock,
    ):
        self.prober = prober if prober is not None else default_prober()
        self.clock = clock if clock is not None else wall_clock_ms
        self.live_window_ms = live_window_ms
        self.formatter = formatter
        self._state = state if state is not None else SessionState()
        self._lock = threading.Lock()

        nodes = tuple(nodes)
        if nodes:
            self.configure_nodes(nodes)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> SessionPhase:
        return self._state.phase

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._state.nodes

    @property
    def is_monitoring(self) -> bool:
        return self._state.phase is SessionPhase.MONITORING

    def _require(self, phase: SessionPhase, action: str):
        if self._state.phase is not phase:
            raise SessionStateError(
                f"Cannot {action} while {self._state.phase.value} (requires {phase.value})"
            )

    def configure_nodes(self, nodes: Iterable[Node]):
        """Replace the node list. Only allowed while Idle."""
        with self._lock:
            self._require(SessionPhase.IDLE, "configure nodes")
            self._state.nodes = validate_nodes(nodes)
        logger.info("Nodes configured: %d", len(self._state.nodes))

    def start(self) -> str:
        """Begin a new session and return its id."""
        with self._lock:
            self._require(SessionPhase.IDLE, "start")
            state = self._state
            state.start_time = self.clock()
            state.end_time = None
            state.records = []
            state.live_stats = aggregate([])
            state.session_stats = aggregate([])
            state.phase = SessionPhase.MONITORING
            session_id = str(state.start_time)
        logger.info("Session started: id=%s, nodes=%d", session_id, len(state.nodes))
        return session_id

    def tick(self) -> MonitorSnapshot | None:
        """Probe every node once and refresh statistics.

        Returns:
            The new snapshot, or None if no session is being monitored
        """
        with self._lock:
            if self._state.phase is not SessionPhase.MONITORING:
                logger.debug("Tick ignored: phase=%s", self._state.phase.value)
                return None

            now = self.clock()
            state = self._state
            if state.records and now < state.records[-1].timestamp:
                # Wall clock went backwards; keep the store time-ordered
                now = state.records[-1].timestamp

            new_records = sample_nodes(self.prober, state.nodes, now)
            state.records.extend(new_records)

            state.live_stats = aggregate(live_window(state.records, now, self.live_window_ms))
            state.session_stats = aggregate(state.records)
            snapshot = self._build_snapshot(now)

        logger.debug(
            "Tick: ts=%d, appended=%d, live_score=%d, session_score=%d",
            now,
            len(new_records),
            snapshot.live_stats.score,
            snapshot.session_stats.score,
        )
        return snapshot

    def stop(self) -> Session:
        """End monitoring and return the frozen session."""
        with self._lock:
            self._require(SessionPhase.MONITORING, "stop")
            self._state.end_time = self.clock()
            self._state.phase = SessionPhase.SUMMARY
            session = self._state.to_session()
        logger.info(
            "Session stopped: id=%s, records=%d, duration=%.1fs",
            session.id,
            len(session.records),
            (session.end_time - session.start_time) / 1000,
        )
        return session

    def close_summary(self):
        """Dismiss the finished session and return to a fresh Idle state."""
        with self._lock:
            self._require(SessionPhase.SUMMARY, "close summary")
            state = self._state
            state.phase = SessionPhase.IDLE
            state.start_time = None
            state.end_time = None
            state.records = []
            state.live_stats = BASELINE_STATS
            state.session_stats = BASELINE_STATS
        logger.info("Summary closed")

    def session(self) -> Session:
        """Current session, open (end_time None) while monitoring."""
        with self._lock:
            return self._state.to_session()

    def report(self) -> SessionReport:
        """Summary report for the finished session."""
        with self._lock:
            self._require(SessionPhase.SUMMARY, "build report")
            session = self._state.to_session()
            nodes = self._state.nodes
        return build_report(session, nodes)

    def snapshot(self, now: int | None = None) -> MonitorSnapshot:
        """Current snapshot without probing."""
        with self._lock:
            return self._build_snapshot(self.clock() if now is None else now)

    def _build_snapshot(self, now: int) -> MonitorSnapshot:
        state = self._state
        return MonitorSnapshot(
            timestamp=now,
            phase=state.phase,
            live_stats=state.live_stats,
            session_stats=state.session_stats,
            chart=tuple(chart_series(state.records, len(state.nodes), self.formatter)),
            anomalies=tuple(anomalies(state.records)),
            record_count=len(state.records),
        )
