"""Debt aggregates derived from title rows."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from collection_engine.models.collection.enums import TitleKind, TitleStatus
from collection_engine.models.collection.title import Title

OPEN_STATUSES = frozenset({TitleStatus.OPEN, TitleStatus.OVERDUE})


@dataclass
class Debt:
    """Logical grouping of a standalone title or a parent plus installments.

    Not persisted; rebuilt from titles on every read.
    """

    debt_id: str
    client_id: str
    titles: list[Title]  # constituents ordered by installment number
    total_installments: int
    total_outstanding: Decimal
    open_count: int
    paid_count: int
    earliest_due_date: date | None
    has_overdue: bool
    header: Title | None = None  # parent row, when fetched
    effective_statuses: dict[str, TitleStatus] = field(default_factory=dict)

    @property
    def open_titles(self) -> list[Title]:
        """Constituents still owed: effective OPEN or OVERDUE, not in an agreement."""
        return [
            t
            for t in self.titles
            if t.status != TitleStatus.IN_AGREEMENT and self.status_of(t) in OPEN_STATUSES
        ]

    @property
    def is_split(self) -> bool:
        """True for parent + installments debts."""
        return self.header is not None or any(t.kind == TitleKind.INSTALLMENT for t in self.titles)

    @property
    def document_number(self) -> str | None:
        source = self.header or (self.titles[0] if self.titles else None)
        return source.document_number if source else None

    def status_of(self, title: Title) -> TitleStatus:
        """Effective status of a constituent at grouping time."""
        return self.effective_statuses.get(title.title_id, title.status)


@dataclass
class ClientDebts:
    """Open debts of one client (cliente com dividas)."""

    client_id: str
    debts: list[Debt]
    total_outstanding: Decimal
    name: str = ""
    tax_id: str = ""  # CPF/CNPJ

    @property
    def title_ids(self) -> list[str]:
        """Ids of every open constituent across the client's debts."""
        return [t.title_id for d in self.debts for t in d.open_titles]
