"""Tests for the session report and CSV export."""

from conftest import down, lost, ok
from netpulse.models import QualityGrade, Session
from netpulse.report import (
    CSV_HEADER,
    build_report,
    default_csv_filename,
    session_to_csv,
    write_session_csv,
)


def make_session(records, start=0, end=120_000):
    return Session(id=str(start), start_time=start, end_time=end, records=tuple(records))


def stamp(ts):
    return f"T{ts}"


class TestBuildReport:
    def test_overall_and_per_node(self, nodes):
        records = [
            ok(10, ts=1000, node_id="1"),
            ok(20, ts=1000, node_id="2"),
            lost(ts=1000, node_id="3"),
            ok(10, ts=2000, node_id="1"),
            ok(40, ts=2000, node_id="2"),
            lost(ts=2000, node_id="3"),
        ]

        report = build_report(make_session(records), nodes)

        assert report.overall.packet_loss_rate_pct == 33.33
        assert [b.node.id for b in report.nodes] == ["1", "2", "3"]
        assert report.nodes[0].stats.avg_latency_ms == 10
        assert report.nodes[1].stats.avg_latency_ms == 30
        assert report.nodes[1].stats.max_latency_ms == 40
        assert report.nodes[2].stats.packet_loss_rate_pct == 100
        assert report.nodes[2].stats.status is QualityGrade.POOR
        assert report.duration_minutes == 2.0

    def test_node_without_records_gets_baseline(self, nodes):
        report = build_report(make_session([ok(10, node_id="1")]), nodes)

        assert report.nodes[2].stats.score == 100

    def test_open_session_uses_now(self, nodes):
        session = Session(id="0", start_time=0, end_time=None)

        report = build_report(session, nodes, now=30_000)

        assert report.duration_minutes == 0.5


class TestCsvExport:
    def test_header_and_one_line_per_record(self, nodes):
        records = [
            ok(12, ts=1000, node_id="1"),
            lost(ts=1000, node_id="2"),
            down(ts=2000, node_id="3"),
        ]
        session = make_session(records)

        lines = session_to_csv(session, nodes, formatter=stamp).split("\n")

        assert lines[0] == ",".join(CSV_HEADER)
        assert len(lines) == len(records) + 1
        assert lines[1] == "T1000,Loopback,127.0.0.1,12,Up,No"
        assert lines[2] == "T1000,Gateway,192.168.1.1,0,Up,Yes"
        assert lines[3] == "T2000,Google DNS,8.8.8.8,0,Down,Yes"

    def test_fields_in_documented_order(self, nodes):
        session = make_session([ok(7, ts=5, node_id="3")])

        line = session_to_csv(session, nodes, formatter=stamp).split("\n")[1]
        timestamp, name, address, latency, status, loss = line.split(",")

        assert (timestamp, name, address, latency, status, loss) == (
            "T5",
            "Google DNS",
            "8.8.8.8",
            "7",
            "Up",
            "No",
        )

    def test_unknown_node(self, nodes):
        session = make_session([ok(7, ts=5, node_id="99")])

        line = session_to_csv(session, nodes, formatter=stamp).split("\n")[1]

        assert line == "T5,Unknown,Unknown,7,Up,No"

    def test_empty_session_is_header_only(self, nodes):
        assert session_to_csv(make_session([]), nodes) == ",".join(CSV_HEADER)

    def test_write_to_directory_uses_default_name(self, nodes, tmp_path):
        session = make_session([ok(7, ts=5, node_id="1")], start=1_700_000_000_000)

        path = write_session_csv(session, nodes, tmp_path, formatter=stamp)

        assert path.parent == tmp_path
        assert path.name == default_csv_filename(session)
        assert path.name == "network_report_20231114T221320Z.csv"
        assert path.read_text(encoding="utf-8").splitlines()[1] == "T5,Loopback,127.0.0.1,7,Up,No"

    def test_write_appends_extension(self, nodes, tmp_path):
        session = make_session([])

        path = write_session_csv(session, nodes, tmp_path / "report", formatter=stamp)

        assert path.name == "report.csv"
        assert path.exists()
