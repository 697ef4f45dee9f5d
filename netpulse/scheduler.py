"""Timer-driven scheduling of session ticks and the wall-clock display."""

import logging
import time

from PySide6.QtCore import QObject, QTimer, Signal

from netpulse.session import SessionController, SessionStateError

logger = logging.getLogger(__name__)


class MonitorScheduler(QObject):
    """Drives a SessionController from Qt timers.

    Key features:
    - Tick timer calls controller.tick() once per interval while monitoring
    - Independent clock timer emits wall-clock time for the header display
    - Ticks run to completion inside the timer slot, so they never overlap
    - stop_monitoring() stops the timer first: no tick fires after it returns

    Thread-safe: All state access on Qt main thread via signals/slots.
    """

    # Signals
    snapshot_ready = Signal(object)  # MonitorSnapshot
    session_started = Signal(str)  # session id
    session_finished = Signal(object)  # frozen Session
    summary_closed = Signal()
    clock_tick = Signal(object)  # wall clock ms; exceeds a C++ int
    error = Signal(str)  # error message

    def __init__(
        self,
        controller: SessionController,
        interval_ms: int = 1000,
        clock_interval_ms: int = 1000,
        parent=None,
    ):
        """Initialize scheduler.

        Args:
            controller: Session controller to drive
            interval_ms: Sampling interval in milliseconds
            clock_interval_ms: Wall-clock refresh interval in milliseconds
            parent: Qt parent object
        """
        super().__init__(parent)

        self.controller = controller
        self.interval_ms = interval_ms

        # Timer for periodic sampling
        self.timer = QTimer(self)
        self.timer.timeout.connect(self._on_tick)

        # Timer for the header clock; never touches the record store
        self.clock_timer = QTimer(self)
        self.clock_timer.setInterval(clock_interval_ms)
        self.clock_timer.timeout.connect(self._on_clock)

        self.tick_count = 0

    @property
    def is_monitoring(self) -> bool:
        return self.controller.is_monitoring

    def start_clock(self):
        self.clock_timer.start()
        self._on_clock()

    def stop_clock(self):
        self.clock_timer.stop()

    def start_monitoring(self) -> bool:
        """Start a new session and the tick timer.

        Returns:
            True if a session was started
        """
        if self.is_monitoring:
            return False

        try:
            session_id = self.controller.start()
        except SessionStateError as e:
            logger.warning("Cannot start monitoring: %s", e)
            self.error.emit(str(e))
            return False

        self.tick_count = 0
        self.timer.start(self.interval_ms)
        logger.info(
            "Monitoring started: %d nodes, interval=%dms",
            len(self.controller.nodes),
            self.interval_ms,
        )
        self.session_started.emit(session_id)
        return True

    def stop_monitoring(self):
        """Stop the tick timer, then close the session.

        Returns:
            The frozen Session, or None if not monitoring
        """
        if not self.is_monitoring:
            return None

        self.timer.stop()
        session = self.controller.stop()
        logger.info("Monitoring stopped after %d ticks", self.tick_count)
        self.session_finished.emit(session)
        return session

    def close_summary(self):
        """Discard the finished session."""
        try:
            self.controller.close_summary()
        except SessionStateError as e:
            logger.warning("Cannot close summary: %s", e)
            self.error.emit(str(e))
            return
        self.summary_closed.emit()

    def _on_tick(self):
        """Handle timer tick - sample all nodes and publish the snapshot."""
        if not self.is_monitoring:
            return

        try:
            snapshot = self.controller.tick()
        except Exception as e:
            logger.exception("Tick failed: %s", e)
            self.error.emit(str(e))
            return

        if snapshot is None:
            return

        self.tick_count += 1
        self.snapshot_ready.emit(snapshot)

    def _on_clock(self):
        self.clock_tick.emit(int(time.time() * 1000))

