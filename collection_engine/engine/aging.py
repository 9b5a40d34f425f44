"""Aging report for overdue installments.

Only strictly overdue items (``due_date < as_of``) are bucketed. The four
brackets are always returned, empty or not, so reports render with a
stable layout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Protocol

from collection_engine.engine.status import StatusResolver
from collection_engine.exceptions import ValidationError
from collection_engine.models.collection import Title, TitleKind, TitleStatus
from collection_engine.money import ZERO, percent_of

logger = logging.getLogger(__name__)


class AgingInput(Protocol):
    due_date: date
    outstanding_balance: Decimal


@dataclass(frozen=True)
class AgingBracket:
    """Fixed day range used to classify overdue items."""

    label: str
    min_days: int
    max_days: int | None  # None = unbounded
    color: str

    def contains(self, days: int) -> bool:
        if days < self.min_days:
            return False
        return self.max_days is None or days <= self.max_days

    @property
    def range_label(self) -> str:
        if self.max_days is None:
            return f"{self.min_days}+ dias"
        return f"{self.min_days}-{self.max_days} dias"


AGING_BRACKETS: tuple[AgingBracket, ...] = (
    AgingBracket("0-30 dias", 0, 30, "#eab308"),
    AgingBracket("31-60 dias", 31, 60, "#f97316"),
    AgingBracket("61-90 dias", 61, 90, "#ef4444"),
    AgingBracket("90+ dias", 91, None, "#7f1d1d"),
)


@dataclass(frozen=True)
class OverdueItem:
    """Minimal aging input."""

    due_date: date
    outstanding_balance: Decimal
    reference_id: str | None = None
    client_id: str | None = None


@dataclass(frozen=True)
class AgingBucket:
    """Count and value of overdue items in one bracket."""

    bracket: AgingBracket
    count: int
    value: Decimal
    percentage: Decimal  # share of total value, 0-100

    @property
    def label(self) -> str:
        return self.bracket.label

    @property
    def color(self) -> str:
        return self.bracket.color

    @property
    def min_days(self) -> int:
        return self.bracket.min_days

    @property
    def max_days(self) -> int | None:
        return self.bracket.max_days


@dataclass(frozen=True)
class AgingReport:
    """Aging buckets plus totals."""

    as_of: date
    buckets: tuple[AgingBucket, ...]

    @property
    def total_value(self) -> Decimal:
        return sum((b.value for b in self.buckets), ZERO)

    @property
    def total_count(self) -> int:
        return sum(b.count for b in self.buckets)

    def bucket(self, label: str) -> AgingBucket:
        for b in self.buckets:
            if b.label == label:
                return b
        raise KeyError(label)


class AgingClassifier:
    """Bucket overdue items by days past due."""

    def __init__(self, brackets: tuple[AgingBracket, ...] = AGING_BRACKETS) -> None:
        self.brackets = brackets

    def days_overdue(self, due_date: date, as_of: date) -> int:
        """Days between ``due_date`` and ``as_of``; negative when not due."""
        return (as_of - due_date).days

    def bracket_for(self, days: int) -> AgingBracket | None:
        for bracket in self.brackets:
            if bracket.contains(days):
                return bracket
        return None

    def classify(self, items: Iterable[AgingInput], as_of: date) -> list[AgingBucket]:
        """Classify overdue items into the fixed brackets.

        Parameters
        ----------
        items : Iterable[AgingInput]
            Objects exposing ``due_date`` and ``outstanding_balance``.
        as_of : date
            Reference day.

        Returns
        -------
        list[AgingBucket]
            One bucket per bracket, in bracket order.
        """
        if as_of is None:
            raise ValidationError("as_of is required", field="as_of")

        counts = {b: 0 for b in self.brackets}
        values = {b: ZERO for b in self.brackets}

        for item in items:
            days = self.days_overdue(item.due_date, as_of)
            if days <= 0:
                continue
            bracket = self.bracket_for(days)
            if bracket is None:
                continue
            counts[bracket] += 1
            values[bracket] += item.outstanding_balance

        total = sum(values.values(), ZERO)
        return [
            AgingBucket(
                bracket=b,
                count=counts[b],
                value=values[b],
                percentage=percent_of(values[b], total),
            )
            for b in self.brackets
        ]

    def build_report(self, items: Iterable[AgingInput], as_of: date) -> AgingReport:
        buckets = tuple(self.classify(items, as_of))
        report = AgingReport(as_of=as_of, buckets=buckets)
        logger.debug(
            "Aging as of %s: %d overdue items totalling %s",
            as_of,
            report.total_count,
            report.total_value,
        )
        return report


def aging_items_from_titles(
    titles: Iterable[Title],
    today: date,
    resolver: StatusResolver | None = None,
) -> list[OverdueItem]:
    """Overdue, unpaid titles as aging inputs.

    Parent headers are skipped since their installments carry the
    obligation. Titles already in an agreement are skipped too.
    """
    resolver = resolver or StatusResolver()
    items = []
    for title in titles:
        if title.kind == TitleKind.PARENT or title.status == TitleStatus.IN_AGREEMENT:
            continue
        if resolver.resolve(title, today) != TitleStatus.OVERDUE:
            continue
        items.append(
            OverdueItem(
                due_date=title.due_date,
                outstanding_balance=title.outstanding_balance,
                reference_id=title.title_id,
                client_id=title.client_id,
            )
        )
    return items
