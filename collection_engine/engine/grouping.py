"""Group title rows into debts.

A debt is either one standalone title or a parent header plus the
installments generated from it. Rows are keyed by
``parent_title_id or title_id``; the header contributes metadata only,
since it carries no due obligation of its own.

Records that cannot be placed consistently (client mismatch, bad
installment number, duplicated installment) raise
``InconsistentDataError`` internally; the error is logged and the record
is left out. One bad row never aborts the whole grouping.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from collection_engine.engine.status import StatusResolver
from collection_engine.exceptions import InconsistentDataError
from collection_engine.models import Client
from collection_engine.models.collection import (
    ClientDebts,
    Debt,
    Title,
    TitleKind,
    TitleStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class _Group:
    key: str
    header: Title | None = None
    members: list[Title] = field(default_factory=list)

    @property
    def client_id(self) -> str | None:
        if self.header is not None:
            return self.header.client_id
        return self.members[0].client_id if self.members else None


class DebtGrouper:
    """Aggregate titles into ``Debt`` records."""

    def __init__(self, resolver: StatusResolver | None = None) -> None:
        self._resolver = resolver or StatusResolver()

    def group(
        self,
        titles: Iterable[Title],
        today: date,
        open_only: bool = True,
    ) -> list[Debt]:
        """Group titles into debts.

        Parameters
        ----------
        titles : Iterable[Title]
            Rows for one client or the whole portfolio.
        today : date
            Reference day for effective statuses.
        open_only : bool
            Drop debts without any OPEN/OVERDUE constituent.

        Returns
        -------
        list[Debt]
            Debts in order of first appearance of their key.
        """
        groups = self._collect(titles)

        debts = []
        for grp in groups.values():
            members = self._validated_members(grp)
            if not members:
                logger.debug("Skipping debt %s: no constituents", grp.key)
                continue
            debt = self._build_debt(grp, members, today)
            if open_only and debt.open_count == 0:
                continue
            debts.append(debt)

        logger.debug("Grouped titles into %d debts (open_only=%s)", len(debts), open_only)
        return debts

    def group_by_client(
        self,
        titles: Iterable[Title],
        today: date,
        clients: dict[str, Client] | None = None,
    ) -> list[ClientDebts]:
        """Group open debts per client, largest total first."""
        by_client: dict[str, ClientDebts] = {}
        for debt in self.group(titles, today, open_only=True):
            entry = by_client.get(debt.client_id)
            if entry is None:
                client = (clients or {}).get(debt.client_id)
                entry = ClientDebts(
                    client_id=debt.client_id,
                    debts=[],
                    total_outstanding=Decimal("0"),
                    name=client.name if client else "",
                    tax_id=client.tax_id if client else "",
                )
                by_client[debt.client_id] = entry
            entry.debts.append(debt)
            entry.total_outstanding += debt.total_outstanding

        return sorted(
            (c for c in by_client.values() if c.debts),
            key=lambda c: c.total_outstanding,
            reverse=True,
        )

    def _collect(self, titles: Iterable[Title]) -> dict[str, _Group]:
        groups: dict[str, _Group] = {}
        for title in titles:
            key = title.group_key
            grp = groups.get(key)
            if grp is None:
                grp = groups[key] = _Group(key=key)
            if title.kind == TitleKind.PARENT:
                grp.header = title
            else:
                grp.members.append(title)

        # A header stored without total_installments still heads its children
        for grp in groups.values():
            if grp.header is not None:
                continue
            if not any(t.kind == TitleKind.INSTALLMENT for t in grp.members):
                continue
            for title in grp.members:
                if title.title_id == grp.key:
                    grp.header = title
                    grp.members.remove(title)
                    break
        return groups

    def _validated_members(self, grp: _Group) -> list[Title]:
        client_id = grp.client_id
        declared_total = grp.header.total_installments if grp.header else None
        seen_numbers: set[int] = set()
        accepted = []

        for title in grp.members:
            try:
                self._check_member(title, client_id, declared_total, seen_numbers)
            except InconsistentDataError as exc:
                logger.warning(
                    "Excluding title %s from debt %s: %s",
                    exc.title_id,
                    grp.key,
                    exc,
                    extra={"extra": {"title_id": exc.title_id, "debt_id": grp.key}},
                )
                continue
            if title.kind == TitleKind.INSTALLMENT:
                seen_numbers.add(title.installment_number)
            accepted.append(title)

        accepted.sort(key=lambda t: t.sort_number)
        return accepted

    @staticmethod
    def _check_member(
        title: Title,
        client_id: str | None,
        declared_total: int | None,
        seen_numbers: set[int],
    ) -> None:
        if title.client_id != client_id:
            raise InconsistentDataError(
                f"client {title.client_id} does not match debt client {client_id}",
                title_id=title.title_id,
            )
        if title.kind != TitleKind.INSTALLMENT:
            return
        number = title.installment_number
        if number is None or number < 1:
            raise InconsistentDataError(
                f"invalid installment number {number!r}", title_id=title.title_id
            )
        if declared_total is not None and number > declared_total:
            raise InconsistentDataError(
                f"installment {number} exceeds total of {declared_total}",
                title_id=title.title_id,
            )
        if number in seen_numbers:
            raise InconsistentDataError(
                f"duplicate installment number {number}", title_id=title.title_id
            )

    def _build_debt(self, grp: _Group, members: list[Title], today: date) -> Debt:
        statuses = self._resolver.resolve_many(members, today)

        open_members = [t for t in members if self._resolver.is_collectible(t, today)]
        unpaid = [t for t in members if statuses[t.title_id] != TitleStatus.PAID]

        if grp.header is not None and grp.header.total_installments:
            total_installments = grp.header.total_installments
        elif any(t.kind == TitleKind.INSTALLMENT for t in members):
            total_installments = len(members)
        else:
            total_installments = 1

        return Debt(
            debt_id=grp.key,
            client_id=members[0].client_id,
            titles=members,
            header=grp.header,
            total_installments=total_installments,
            total_outstanding=sum(
                (t.outstanding_balance for t in open_members), Decimal("0")
            ),
            open_count=len(open_members),
            paid_count=sum(1 for t in members if statuses[t.title_id] == TitleStatus.PAID),
            earliest_due_date=min((t.due_date for t in unpaid), default=None),
            has_overdue=any(statuses[t.title_id] == TitleStatus.OVERDUE for t in open_members),
            effective_statuses=statuses,
        )
