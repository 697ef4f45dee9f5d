"""Qt table model for the anomaly event log."""

from typing import Callable, Sequence

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from netpulse.models import Node, PingRecord
from netpulse.timefmt import format_clock
from netpulse.windows import ANOMALY_LATENCY_MS


class AnomalyModel(QAbstractTableModel):
    """Table model for recent anomalies (newest first).

    The whole list is replaced on every tick with beginResetModel/endResetModel,
    since the anomaly list is recomputed from scratch and holds at most a few rows.
    """

    def __init__(self, nodes: Sequence[Node] = (), formatter: Callable[[int], str] = format_clock, parent=None):
        super().__init__(parent)
        self._records = []
        self._node_names = {}
        self._formatter = formatter
        self.set_nodes(nodes)

        self._columns = ["Time", "Node", "Issue", "Measured Value", "Normal Range"]

        # Cached strings to reduce allocations
        self._issue_loss = "PACKET LOSS"
        self._issue_latency = "HIGH LATENCY"
        self._normal_latency = f"<= {ANOMALY_LATENCY_MS}ms"

    def set_nodes(self, nodes: Sequence[Node]):
        self._node_names = {node.id: node.name for node in nodes}

    def rowCount(self, parent=QModelIndex()):
        """Return the number of rows (anomalies)."""
        if parent.isValid():
            return 0
        return len(self._records)

    def columnCount(self, parent=QModelIndex()):
        if parent.isValid():
            return 0
        return len(self._columns)

    def data(self, index, role=Qt.DisplayRole):
        """Return data for a given cell."""
        if not index.isValid():
            return None

        if index.row() >= len(self._records) or index.row() < 0:
            return None

        record = self._records[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == 0:  # Time
                return self._formatter(record.timestamp)
            elif col == 1:  # Node
                return self._node_names.get(record.node_id, record.node_id)
            elif col == 2:  # Issue
                return self._issue_loss if record.packet_loss else self._issue_latency
            elif col == 3:  # Measured value
                return "100% Loss" if record.packet_loss else f"{record.latency_ms}ms"
            elif col == 4:  # Normal range
                return "0% Loss" if record.packet_loss else self._normal_latency

        elif role == Qt.TextAlignmentRole:
            if col in (3, 4):
                return Qt.AlignRight | Qt.AlignVCenter
            return Qt.AlignLeft | Qt.AlignVCenter

        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role == Qt.DisplayRole and orientation == Qt.Horizontal:
            if 0 <= section < len(self._columns):
                return self._columns[section]
        return None

    def flags(self, index):
        """Return item flags (read-only)."""
        if not index.isValid():
            return Qt.NoItemFlags
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable

    def set_anomalies(self, records: Sequence[PingRecord]):
        """Replace the displayed anomalies."""
        self.beginResetModel()
        self._records = list(records)
        self.endResetModel()

    def clear(self):
        self.set_anomalies([])

    def get_anomalies(self):
        return list(self._records)
