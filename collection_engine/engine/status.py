"""Effective status resolution for titles."""

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from collection_engine.exceptions import ValidationError
from collection_engine.models.collection import OPEN_STATUSES, Title, TitleKind, TitleStatus


@dataclass(frozen=True)
class StatusCorrection:
    """A title whose stored status disagrees with its effective status."""

    title_id: str
    stored_status: TitleStatus
    effective_status: TitleStatus


def resolve_status(stored_status: TitleStatus, due_date: date, today: date) -> TitleStatus:
    """Resolve a stored status against the due date.

    PAID is terminal. Anything else past its due date is OVERDUE;
    otherwise the stored value stands.
    """
    if stored_status == TitleStatus.PAID:
        return TitleStatus.PAID
    if due_date < today:
        return TitleStatus.OVERDUE
    return stored_status


class StatusResolver:
    """Derive effective title statuses for a given day.

    ``today`` is always passed in; the resolver never reads the clock.
    """

    def resolve(self, title: Title, today: date) -> TitleStatus:
        """Return the effective status of ``title`` on ``today``."""
        if today is None:
            raise ValidationError("today is required", field="today")
        return resolve_status(title.status, title.due_date, today)

    def is_collectible(self, title: Title, today: date) -> bool:
        """True when the title still counts as owed debt.

        Titles covered by an agreement are owed through the agreement, so
        they stay out even once past due.
        """
        if title.status == TitleStatus.IN_AGREEMENT:
            return False
        return self.resolve(title, today) in OPEN_STATUSES

    def resolve_many(self, titles: Iterable[Title], today: date) -> dict[str, TitleStatus]:
        """Map title id to effective status."""
        return {t.title_id: self.resolve(t, today) for t in titles}

    def reconcile(self, titles: Iterable[Title], today: date) -> list[StatusCorrection]:
        """List the corrections a caller may write back.

        Parent headers carry no due obligation and are never corrected.
        Titles in an agreement keep their stored status so a write-back
        never drops agreement coverage.
        Nothing is mutated here.
        """
        corrections = []
        for title in titles:
            if title.kind == TitleKind.PARENT or title.status == TitleStatus.IN_AGREEMENT:
                continue
            effective = self.resolve(title, today)
            if effective != title.status:
                corrections.append(
                    StatusCorrection(
                        title_id=title.title_id,
                        stored_status=title.status,
                        effective_status=effective,
                    )
                )
        return corrections
