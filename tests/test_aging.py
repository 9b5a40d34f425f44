"""Tests for the aging classifier."""

from dataclasses import asdict
from datetime import date, timedelta
from decimal import Decimal

import pytest

from collection_engine.engine import (
    AGING_BRACKETS,
    AgingClassifier,
    OverdueItem,
    aging_items_from_titles,
)
from collection_engine.exceptions import ValidationError
from collection_engine.models.collection import TitleStatus

AS_OF = date(2025, 6, 15)


def _item(days_overdue: int, value: str) -> OverdueItem:
    return OverdueItem(due_date=AS_OF - timedelta(days=days_overdue), outstanding_balance=Decimal(value))


@pytest.fixture
def classifier() -> AgingClassifier:
    return AgingClassifier()


class TestAgingBrackets:
    """Tests for the fixed bracket table."""

    def test_four_contiguous_brackets(self) -> None:
        assert [b.label for b in AGING_BRACKETS] == ["0-30 dias", "31-60 dias", "61-90 dias", "90+ dias"]
        assert AGING_BRACKETS[-1].max_days is None

    @pytest.mark.parametrize(
        "days,label",
        [(1, "0-30 dias"), (30, "0-30 dias"), (31, "31-60 dias"), (60, "31-60 dias"),
         (61, "61-90 dias"), (90, "61-90 dias"), (91, "90+ dias"), (1000, "90+ dias")],
    )
    def test_boundaries(self, classifier, days: int, label: str) -> None:
        assert classifier.bracket_for(days).label == label

    def test_range_label(self) -> None:
        assert AGING_BRACKETS[1].range_label == "31-60 dias"
        assert AGING_BRACKETS[3].range_label == "91+ dias"


class TestClassify:
    """Tests for AgingClassifier.classify."""

    def test_buckets_counts_and_values(self, classifier) -> None:
        items = [_item(5, "100"), _item(30, "100"), _item(45, "200"), _item(120, "600")]

        buckets = classifier.classify(items, AS_OF)

        assert [b.count for b in buckets] == [2, 1, 0, 1]
        assert [b.value for b in buckets] == [Decimal("200"), Decimal("200"), Decimal("0"), Decimal("600")]
        assert [b.percentage for b in buckets] == [
            Decimal("20.00"), Decimal("20.00"), Decimal("0.00"), Decimal("60.00"),
        ]

    def test_not_yet_overdue_items_skipped(self, classifier) -> None:
        """Due today or in the future is not aged."""
        buckets = classifier.classify([_item(0, "100"), _item(-10, "50")], AS_OF)
        assert sum(b.count for b in buckets) == 0

    def test_empty_input_returns_all_brackets(self, classifier) -> None:
        buckets = classifier.classify([], AS_OF)

        assert len(buckets) == 4
        assert all(b.count == 0 and b.percentage == Decimal("0.00") for b in buckets)

    def test_repeatable_and_leaves_items_untouched(self, classifier, make_title) -> None:
        titles = [
            make_title("t1", amount="100.00", due_date=AS_OF - timedelta(days=5)),
            make_title("t2", amount="200.50", due_date=AS_OF - timedelta(days=45)),
            make_title("t3", amount="600.00", due_date=AS_OF - timedelta(days=120)),
        ]
        before = [asdict(t) for t in titles]

        first = classifier.classify(titles, AS_OF)
        second = classifier.classify(titles, AS_OF)

        assert first == second
        assert [b.count for b in first] == [1, 1, 0, 1]
        assert [asdict(t) for t in titles] == before

    def test_bucket_exposes_bracket_fields(self, classifier) -> None:
        bucket = classifier.classify([_item(95, "10")], AS_OF)[3]
        assert bucket.label == "90+ dias"
        assert bucket.min_days == 91
        assert bucket.max_days is None
        assert bucket.color.startswith("#")

    def test_requires_as_of(self, classifier) -> None:
        with pytest.raises(ValidationError):
            classifier.classify([], None)

    def test_report_totals(self, classifier) -> None:
        report = classifier.build_report([_item(5, "100.50"), _item(70, "49.50")], AS_OF)

        assert report.total_count == 2
        assert report.total_value == Decimal("150.00")
        assert report.bucket("61-90 dias").count == 1
        with pytest.raises(KeyError):
            report.bucket("unknown")


class TestAgingItemsFromTitles:
    """Tests for aging_items_from_titles."""

    def test_selects_overdue_unpaid_titles(self, make_title) -> None:
        titles = [
            make_title("late", due_date=date(2025, 6, 1), balance=Decimal("40.00")),
            make_title("future", due_date=date(2025, 7, 1)),
            make_title("paid", due_date=date(2025, 6, 1), status=TitleStatus.PAID),
            make_title("agreed", due_date=date(2025, 6, 1), status=TitleStatus.IN_AGREEMENT),
            make_title("header", due_date=date(2025, 1, 1), total_installments=2),
        ]

        items = aging_items_from_titles(titles, AS_OF)

        assert [i.reference_id for i in items] == ["late"]
        assert items[0].outstanding_balance == Decimal("40.00")
