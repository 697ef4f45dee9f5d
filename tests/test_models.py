"""Tests for netpulse.models invariants."""

import dataclasses

import pytest

from netpulse.models import LinkStatus, Node, NodeCategory, PingRecord, Session


class TestPingRecord:
    """Test PingRecord dataclass behavior and invariants."""

    def test_record_valid_success(self):
        """Test valid successful record."""
        record = PingRecord(timestamp=1000, node_id="1", latency_ms=25)

        assert record.timestamp == 1000
        assert record.node_id == "1"
        assert record.latency_ms == 25
        assert record.status is LinkStatus.UP
        assert record.packet_loss is False
        assert record.is_valid

    def test_post_init_loss_forces_zero_latency(self):
        """A lost sample never carries a latency, whatever was passed in."""
        record = PingRecord(timestamp=1000, node_id="1", latency_ms=42, packet_loss=True)

        assert record.latency_ms == 0
        assert record.packet_loss is True
        assert not record.is_valid

    def test_post_init_down_implies_loss(self):
        """A down probe is always counted as lost."""
        record = PingRecord(timestamp=1000, node_id="1", latency_ms=0, status=LinkStatus.DOWN)

        assert record.packet_loss is True
        assert not record.is_valid

    def test_negative_latency_rejected(self):
        with pytest.raises(ValueError, match="latency_ms must be >= 0"):
            PingRecord(timestamp=1000, node_id="1", latency_ms=-1)

    def test_record_is_immutable(self):
        record = PingRecord(timestamp=1000, node_id="1", latency_ms=25)

        with pytest.raises(dataclasses.FrozenInstanceError):
            record.latency_ms = 30

    def test_zero_latency_is_valid(self):
        """Test record with zero latency (edge case)."""
        record = PingRecord(timestamp=1000, node_id="1", latency_ms=0)

        assert record.latency_ms == 0
        assert record.is_valid


class TestNodeAndSession:
    def test_node_default_category(self):
        node = Node("1", "Google DNS", "8.8.8.8")
        assert node.category is NodeCategory.WAN

    def test_category_values_match_config_strings(self):
        assert NodeCategory("Local") is NodeCategory.LOCAL
        assert NodeCategory("Service") is NodeCategory.SERVICE

    def test_session_open_until_end_time_set(self):
        assert Session(id="1", start_time=1, end_time=None).is_open
        assert not Session(id="1", start_time=1, end_time=2).is_open
