"""Tests for sinks and serialization."""

import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from collection_engine.engine import AgingClassifier, OverdueItem
from collection_engine.exceptions import SinkError
from collection_engine.models.collection import TitleKind, TitleStatus
from collection_engine.sinks import ConsoleSink, JsonFileSink, make_event, serialize_value, to_dict


class TestSerialization:
    """Tests for the shared serialization helpers."""

    def test_serialize_value(self) -> None:
        assert serialize_value(Decimal("10.50")) == "10.50"
        assert serialize_value(TitleStatus.OVERDUE) == "OVERDUE"
        assert serialize_value(date(2025, 6, 15)) == "2025-06-15"
        assert serialize_value(datetime(2025, 6, 15, 9, 30)) == "2025-06-15T09:30:00"
        assert serialize_value((1, Decimal("2"))) == [1, "2"]
        assert serialize_value(None) is None

    def test_title_to_dict(self, make_title) -> None:
        data = to_dict(make_title("t1", amount="99.90", total_installments=2))

        assert data["amount"] == "99.90"
        assert data["status"] == "OPEN"
        assert data["kind"] == TitleKind.PARENT.value
        assert data["due_date"] == "2025-07-01"
        json.dumps(data)

    def test_dict_with_nested_dataclasses(self) -> None:
        report = AgingClassifier().build_report(
            [OverdueItem(due_date=date(2025, 6, 1), outstanding_balance=Decimal("10"))],
            date(2025, 6, 15),
        )

        data = to_dict({"aging": report, "as_of": date(2025, 6, 15)})

        assert data["as_of"] == "2025-06-15"
        assert data["aging"]["buckets"][0]["value"] == "10"
        assert data["aging"]["buckets"][0]["bracket"]["label"] == "0-30 dias"

    def test_other_objects(self) -> None:
        assert to_dict(42) == {"value": "42"}

    def test_make_event(self, make_title) -> None:
        event = make_event("title.status_corrected", "t1", make_title("t1"), event_time=datetime(2025, 6, 15))

        assert event.event_type == "title.status_corrected"
        assert event.subject == "t1"
        assert event.source == "collection-engine"
        assert event.data["title_id"] == "t1"
        assert event.event_id


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_write_batch(self, capsys: pytest.CaptureFixture, make_title) -> None:
        sink = ConsoleSink(pretty=False)

        sink.write_batch("titles", [make_title("t1"), make_title("t2")])
        captured = capsys.readouterr()

        assert "titles" in captured.out
        assert "2 records" in captured.out
        assert '"title_id": "t1"' in captured.out
        assert sink.counts == {"titles": 2}

    def test_max_records(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(max_records=1)

        sink.write_batch("items", [{"id": 1}, {"id": 2}, {"id": 3}])

        assert "... and 2 more records" in capsys.readouterr().out

    def test_close_prints_summary(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink()
        sink.write_batch("items", [{"id": 1}])
        sink.write_batch("items", [{"id": 2}])
        sink.close()

        assert "items: 2 records" in capsys.readouterr().out


class TestJsonFileSink:
    """Tests for JsonFileSink."""

    def test_write_batch(self, tmp_path: Path, make_title) -> None:
        sink = JsonFileSink(tmp_path / "out", pretty=True)

        sink.write_batch("titles", [make_title("t1", amount="12.34")])

        data = json.loads((tmp_path / "out" / "titles.json").read_text(encoding="utf-8"))
        assert data[0]["amount"] == "12.34"
        assert sink.counts == {"titles": 1}

    def test_write_document(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path)

        path = sink.write_document("summary", {"total": Decimal("1.50"), "as_of": date(2025, 6, 15)})

        assert json.loads(path.read_text(encoding="utf-8")) == {"total": "1.50", "as_of": "2025-06-15"}

    def test_write_failure_raises_sink_error(self, tmp_path: Path) -> None:
        sink = JsonFileSink(tmp_path)
        with patch("builtins.open", side_effect=OSError("disk full")):
            with pytest.raises(SinkError):
                sink.write_batch("titles", [])

    def test_close(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        sink = JsonFileSink(tmp_path)
        sink.write_batch("titles", [])
        sink.close()
        assert "titles: 0 records" in capsys.readouterr().out
