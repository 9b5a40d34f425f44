"""Settlement agreement (acordo) models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Sequence

from collection_engine.exceptions import ValidationError
from collection_engine.models.collection.enums import AgreementStatus, TitleStatus
from collection_engine.money import HUNDRED, ZERO, to_decimal


@dataclass
class AgreementInstallment:
    """One row of an agreement cronograma."""

    number: int  # 1-based position
    base_amount: Decimal
    interest_amount: Decimal
    total_amount: Decimal
    due_date: date
    status: TitleStatus = TitleStatus.OPEN
    paid_date: date | None = None


@dataclass
class Agreement:
    """Negotiated settlement restructuring one client's titles."""

    agreement_id: str
    client_id: str
    title_ids: list[str]
    original_amount: Decimal  # outstanding balance at creation
    installment_count: int
    interest_rate_percent: Decimal
    first_due_date: date
    schedule: list[AgreementInstallment]
    status: AgreementStatus = AgreementStatus.ACTIVE
    created_at: datetime | None = None
    notes: str | None = None
    debt_ids: list[str] = field(default_factory=list)

    @property
    def agreed_amount(self) -> Decimal:
        """Sum of the schedule totals; the definitive agreed value."""
        return sum((i.total_amount for i in self.schedule), Decimal("0"))

    @property
    def discount_percent(self) -> Decimal:
        """Discount implied by the schedule, negative when interest adds up."""
        return discount_percent(self.original_amount, self.schedule)


def discount_percent(
    original_amount: Any,
    schedule: Sequence[AgreementInstallment],
) -> Decimal:
    """Discount implied by a schedule relative to the original balance.

    ``(original - sum(total_amount)) / original * 100``. Negative when
    interest pushes the agreed total above the original; never clamped.
    """
    original = to_decimal(original_amount, field="original_amount")
    if original <= ZERO:
        raise ValidationError("original_amount must be greater than zero", field="original_amount")
    agreed = sum((i.total_amount for i in schedule), ZERO)
    return (original - agreed) / original * HUNDRED
