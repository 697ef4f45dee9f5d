"""Main window for NetPulse application."""

import logging
from datetime import tzinfo
from functools import partial
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QFileDialog,
    QFrame,
    QGroupBox,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QListWidget,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableView,
    QVBoxLayout,
    QWidget,
)

from netpulse.models import AggregatedStats, Session
from netpulse.report import build_report, default_csv_filename, write_session_csv
from netpulse.scheduler import MonitorScheduler
from netpulse.session import SessionController
from netpulse.stats import BASELINE_STATS
from netpulse.timefmt import format_clock, format_datetime
from netpulse.topology import build_node_views
from netpulse.ui.anomaly_model import AnomalyModel

logger = logging.getLogger(__name__)


def format_stats(title: str, stats: AggregatedStats) -> str:
    """One-line summary for a stats label."""
    text = f"{title}: {stats.status.value} ({stats.score}/100)"
    text += f"\nLoss: {stats.packet_loss_rate_pct}% | Max: {stats.max_latency_ms}ms"
    if stats.jitter_ms > 0:
        text += f" | ±{stats.jitter_ms}ms Jitter"
    return text


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, controller: SessionController, interval_ms: int = 1000, tz: tzinfo | None = None):
        super().__init__()
        self.setWindowTitle("NetPulse")
        self.setGeometry(100, 100, 1100, 700)

        self.controller = controller
        self.formatter = controller.formatter
        self.tz = tz
        self.scheduler = MonitorScheduler(controller, interval_ms=interval_ms, parent=self)
        self.scheduler.snapshot_ready.connect(self.on_snapshot)
        self.scheduler.session_finished.connect(self.on_session_finished)
        self.scheduler.clock_tick.connect(self.on_clock_tick)
        self.scheduler.error.connect(self.on_error)

        self.anomaly_model = AnomalyModel(controller.nodes, formatter=self.formatter)

        self.setup_ui()
        self.scheduler.start_clock()

    def closeEvent(self, event: QCloseEvent) -> None:
        """Handle application close event - stop timers."""
        self.scheduler.stop_clock()
        if self.scheduler.is_monitoring:
            self.scheduler.timer.stop()
        super().closeEvent(event)

    def setup_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout(central_widget)

        # Left: topology
        topology_panel = QFrame()
        topology_panel.setFrameStyle(QFrame.Box)
        topology_panel.setFixedWidth(320)
        topology_layout = QVBoxLayout(topology_panel)

        title = QLabel("Network Topology")
        title.setStyleSheet("font-weight: bold; font-size: 14px; margin: 10px;")
        topology_layout.addWidget(title)

        self.topology_list = QListWidget()
        topology_layout.addWidget(self.topology_list)

        self.clock_label = QLabel("--:--:--")
        self.clock_label.setAlignment(Qt.AlignCenter)
        self.clock_label.setStyleSheet("font-family: monospace; font-size: 16px;")
        topology_layout.addWidget(self.clock_label)

        self.toggle_button = QPushButton("Start Monitoring")
        self.toggle_button.clicked.connect(self.toggle_monitoring)
        topology_layout.addWidget(self.toggle_button)

        self.status_label = QLabel("Status: Ready")
        self.status_label.setAlignment(Qt.AlignCenter)
        self.status_label.setStyleSheet("font-weight: bold;")
        topology_layout.addWidget(self.status_label)

        main_layout.addWidget(topology_panel, 0)

        # Right: assessment and anomalies
        analytics = QFrame()
        analytics.setFrameStyle(QFrame.Box)
        analytics_layout = QVBoxLayout(analytics)

        stats_group = QGroupBox("Link Stability Assessment")
        stats_layout = QHBoxLayout(stats_group)
        self.live_label = QLabel(format_stats("Live Quality (60s)", BASELINE_STATS))
        self.session_label = QLabel(format_stats("Session Average", BASELINE_STATS))
        for label in (self.live_label, self.session_label):
            label.setStyleSheet("padding: 5px; font-family: monospace;")
            stats_layout.addWidget(label)
        analytics_layout.addWidget(stats_group)

        anomaly_group = QGroupBox("Recent Anomalies (Event Log)")
        anomaly_layout = QVBoxLayout(anomaly_group)
        self.anomaly_table = QTableView()
        self.anomaly_table.setModel(self.anomaly_model)
        self.anomaly_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.anomaly_table.setSelectionBehavior(QTableView.SelectRows)
        anomaly_layout.addWidget(self.anomaly_table)
        analytics_layout.addWidget(anomaly_group, 1)

        main_layout.addWidget(analytics, 1)

        self.refresh_topology([])

    def refresh_topology(self, records):
        self.topology_list.clear()
        for view in build_node_views(self.controller.nodes, records):
            self.topology_list.addItem(
                f"{view.node.name} ({view.node.address})  {view.label}  [{view.health.value}]"
            )

    def toggle_monitoring(self):
        if self.scheduler.is_monitoring:
            self.scheduler.stop_monitoring()
        elif self.scheduler.start_monitoring():
            self.toggle_button.setText("End Meeting")
            self.status_label.setText("Status: Monitoring")
            self.anomaly_model.clear()
            self.live_label.setText(format_stats("Live Quality (60s)", BASELINE_STATS))
            self.session_label.setText(format_stats("Session Average", BASELINE_STATS))

    def on_snapshot(self, snapshot):
        self.live_label.setText(format_stats("Live Quality (60s)", snapshot.live_stats))
        self.session_label.setText(format_stats("Session Average", snapshot.session_stats))
        self.anomaly_model.set_anomalies(snapshot.anomalies)
        self.refresh_topology(self.controller.state.records)

    def on_clock_tick(self, timestamp_ms: int):
        self.clock_label.setText(self.formatter(timestamp_ms))

    def on_error(self, message: str):
        self.status_label.setText(f"Status: Error - {message}")

    def on_session_finished(self, session: Session):
        """Show the end-of-session report, then return to Idle."""
        self.toggle_button.setText("Start Monitoring")
        self.status_label.setText("Status: Stopped")

        report = build_report(session, self.controller.nodes)
        start = format_clock(session.start_time, False, self.tz)
        end = format_clock(session.end_time, False, self.tz)
        lines = [
            f"{start} - {end}"
            f"  ({report.duration_minutes:.1f} Minutes Duration)",
            f"Overall Grade: {report.overall.status.value}",
            f"Avg Latency: {report.overall.avg_latency_ms} ms | "
            f"Packet Loss: {report.overall.packet_loss_rate_pct}% | "
            f"Stability Score: {report.overall.score}/100",
            "",
        ]
        for item in report.nodes:
            lines.append(
                f"{item.node.name} ({item.node.address}): avg {item.stats.avg_latency_ms} ms, "
                f"max {item.stats.max_latency_ms} ms, loss {item.stats.packet_loss_rate_pct}% "
                f"- {item.stats.status.value}"
            )

        box = QMessageBox(self)
        box.setWindowTitle("Executive Network Report")
        box.setText("\n".join(lines))
        export_button = box.addButton("Download CSV", QMessageBox.ActionRole)
        box.addButton("Close Report", QMessageBox.AcceptRole)
        box.exec()

        if box.clickedButton() is export_button:
            self.export_csv(session)

        self.scheduler.close_summary()
        self.anomaly_model.clear()
        self.refresh_topology([])

    def export_csv(self, session: Session):
        """Export session records to a CSV file chosen by the user."""
        filename, _ = QFileDialog.getSaveFileName(
            self, "Export Session to CSV", default_csv_filename(session), "CSV Files (*.csv)"
        )
        if not filename:
            return

        try:
            path = write_session_csv(
                session, self.controller.nodes, Path(filename), partial(format_datetime, tz=self.tz)
            )
            self.status_label.setText(f"Status: Exported {path.name}")
        except UnicodeEncodeError:
            self.status_label.setText("Status: Export failed - Encoding error")
        except OSError as e:
            logger.exception("CSV export failed: %s", e)
            self.status_label.setText(f"Status: Export failed - {type(e).__name__}")
