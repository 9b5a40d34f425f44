"""Title model for the collection domain."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from collection_engine.models.collection.enums import TitleKind, TitleStatus


def classify_kind(parent_title_id: str | None, total_installments: int | None) -> TitleKind:
    """Derive the structural kind of a title row."""
    if parent_title_id is not None:
        return TitleKind.INSTALLMENT
    if total_installments is not None and total_installments >= 2:
        return TitleKind.PARENT
    return TitleKind.STANDALONE


@dataclass
class Title:
    """Billable obligation (titulo) or one of its installments (parcela).

    ``kind`` is computed once from ``parent_title_id`` and
    ``total_installments`` when the record is built.
    """

    title_id: str
    client_id: str
    amount: Decimal
    due_date: date
    status: TitleStatus
    parent_title_id: str | None = None
    installment_number: int | None = None  # 1-based, children only
    total_installments: int | None = None
    original_amount: Decimal | None = None  # principal before splitting
    document_number: str | None = None
    description: str | None = None
    balance: Decimal | None = None  # saldo atual, defaults to amount
    created_at: datetime | None = None
    updated_at: datetime | None = None
    kind: TitleKind = field(init=False)

    def __post_init__(self) -> None:
        self.kind = classify_kind(self.parent_title_id, self.total_installments)
        if self.balance is None:
            self.balance = self.amount

    @property
    def group_key(self) -> str:
        """Identifier of the debt this row belongs to."""
        return self.parent_title_id or self.title_id

    @property
    def outstanding_balance(self) -> Decimal:
        """Current outstanding balance."""
        return self.balance if self.balance is not None else self.amount

    @property
    def sort_number(self) -> int:
        """Installment number used for ordering; standalone rows sort as 0."""
        return self.installment_number or 0
