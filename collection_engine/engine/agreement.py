"""Settlement agreements (acordos).

An agreement converts the outstanding balance of one client's debts into a
new installment plan. Interest is simple and linear by position:
installment ``i`` carries ``base * rate / 100 * i``. This is the plan
offered to debtors, not an approximation of compound interest. Dates step
by calendar month from the first due date, clamping to the month end.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence

from dateutil.relativedelta import relativedelta

from collection_engine.config import AgreementConfig
from collection_engine.exceptions import InvalidEntityStateError, ValidationError
from collection_engine.models.collection import (
    OPEN_STATUSES,
    Agreement,
    AgreementInstallment,
    AgreementStatus,
    Debt,
    Title,
    TitleStatus,
    discount_percent,
)
from collection_engine.money import CENT, HUNDRED, ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({AgreementStatus.FULFILLED, AgreementStatus.CANCELLED})


class AgreementCalculator:
    """Compute agreement schedules and drive the agreement lifecycle."""

    def __init__(self, config: AgreementConfig | None = None) -> None:
        self.config = config or AgreementConfig()

    def compute_schedule(
        self,
        agreed_amount: Any,
        installment_count: int,
        interest_rate_percent: Any,
        first_due_date: date,
    ) -> list[AgreementInstallment]:
        """Build the agreement cronograma.

        Parameters
        ----------
        agreed_amount : Decimal | int | float | str
            Amount to be restructured, must be positive.
        installment_count : int
            Number of installments, at least 1.
        interest_rate_percent : Decimal | int | float | str
            Per-period rate in percent, not negative.
        first_due_date : date
            Due date of installment 1.

        Returns
        -------
        list[AgreementInstallment]
            Installments with totals rounded half-up to cents.

        Raises
        ------
        ValidationError
            If any input is invalid; no schedule is produced.
        """
        amount = to_decimal(agreed_amount, field="agreed_amount")
        rate = to_decimal(
            interest_rate_percent if interest_rate_percent is not None else ZERO,
            field="interest_rate_percent",
        )
        if amount <= ZERO:
            raise ValidationError("agreed_amount must be greater than zero", field="agreed_amount")
        if installment_count is None or installment_count < 1:
            raise ValidationError(
                "installment_count must be at least 1", field="installment_count"
            )
        if rate < ZERO:
            raise ValidationError(
                "interest_rate_percent cannot be negative", field="interest_rate_percent"
            )
        if first_due_date is None:
            raise ValidationError("first_due_date is required", field="first_due_date")

        base = amount / installment_count
        if round_currency(base) < CENT:
            raise ValidationError(
                f"installment_count of {installment_count} leaves installments below one cent",
                field="installment_count",
            )
        schedule = []
        for number in range(1, installment_count + 1):
            interest = base * (rate / HUNDRED) * number
            total_amount = round_currency(base + interest)
            base_amount = round_currency(base)
            schedule.append(
                AgreementInstallment(
                    number=number,
                    base_amount=base_amount,
                    interest_amount=total_amount - base_amount,
                    total_amount=total_amount,
                    due_date=first_due_date + relativedelta(months=number - 1),
                )
            )
        return schedule

    def create_agreement(
        self,
        client_id: str,
        debts: Sequence[Debt],
        agreed_amount: Any,
        installment_count: int,
        first_due_date: date,
        interest_rate_percent: Any = None,
        created_at: datetime | None = None,
        notes: str | None = None,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> Agreement:
        """Create an ACTIVE agreement over the open titles of ``debts``.

        Raises
        ------
        ValidationError
            If no debt is selected, debts span several clients, nothing is
            outstanding, or the schedule inputs are invalid.
        """
        if not debts:
            raise ValidationError("at least one debt must be selected", field="debts")
        foreign = {d.client_id for d in debts} - {client_id}
        if foreign:
            raise ValidationError(
                f"debts belong to other clients: {sorted(foreign)}", field="debts"
            )
        if installment_count is not None and installment_count > self.config.max_installments:
            raise ValidationError(
                f"installment_count cannot exceed {self.config.max_installments}",
                field="installment_count",
            )

        title_ids = [t.title_id for d in debts for t in d.open_titles]
        if not title_ids:
            raise ValidationError("selected debts have no open titles", field="debts")
        original_amount = sum((d.total_outstanding for d in debts), ZERO)
        if original_amount <= ZERO:
            raise ValidationError("selected debts have no outstanding balance", field="debts")

        if interest_rate_percent is None:
            interest_rate_percent = self.config.default_interest_rate_percent
        schedule = self.compute_schedule(
            agreed_amount, installment_count, interest_rate_percent, first_due_date
        )

        agreement = Agreement(
            agreement_id=id_factory(),
            client_id=client_id,
            title_ids=title_ids,
            debt_ids=[d.debt_id for d in debts],
            original_amount=original_amount,
            installment_count=installment_count,
            interest_rate_percent=to_decimal(interest_rate_percent),
            first_due_date=first_due_date,
            schedule=schedule,
            created_at=created_at,
            notes=notes,
        )
        logger.info(
            "Agreement %s for client %s: %s -> %s in %dx (discount %.1f%%)",
            agreement.agreement_id,
            client_id,
            original_amount,
            agreement.agreed_amount,
            installment_count,
            agreement.discount_percent,
        )
        return agreement

    def titles_to_mark_in_agreement(
        self, agreement: Agreement, titles: Iterable[Title]
    ) -> list[Title]:
        """Covered titles that are still open and must move to IN_AGREEMENT."""
        covered = set(agreement.title_ids)
        return [
            t for t in titles if t.title_id in covered and t.status in OPEN_STATUSES
        ]

    def evaluate_status(self, agreement: Agreement, today: date) -> AgreementStatus:
        """Lifecycle status of an agreement on ``today``.

        FULFILLED once every installment is paid; BROKEN when an unpaid
        installment is past due; FULFILLED and CANCELLED never change.
        """
        if agreement.status in TERMINAL_STATUSES:
            return agreement.status
        if agreement.schedule and all(i.status == TitleStatus.PAID for i in agreement.schedule):
            return AgreementStatus.FULFILLED
        if any(i.status != TitleStatus.PAID and i.due_date < today for i in agreement.schedule):
            return AgreementStatus.BROKEN
        return agreement.status

    def refresh(self, agreement: Agreement, today: date) -> AgreementStatus:
        """Apply ``evaluate_status`` to the agreement in place."""
        status = self.evaluate_status(agreement, today)
        if status != agreement.status:
            logger.info(
                "Agreement %s: %s -> %s", agreement.agreement_id, agreement.status.value, status.value
            )
            agreement.status = status
        return status

    def register_installment_payment(
        self, agreement: Agreement, number: int, paid_date: date
    ) -> AgreementInstallment:
        """Mark schedule installment ``number`` as paid."""
        if agreement.status in TERMINAL_STATUSES:
            raise InvalidEntityStateError(
                f"Agreement {agreement.agreement_id} is {agreement.status.value}"
            )
        for installment in agreement.schedule:
            if installment.number == number:
                if installment.status == TitleStatus.PAID:
                    raise InvalidEntityStateError(f"Installment {number} is already paid")
                installment.status = TitleStatus.PAID
                installment.paid_date = paid_date
                return installment
        raise ValidationError(f"installment {number} not in schedule", field="number")

    def cancel(self, agreement: Agreement) -> Agreement:
        """Cancel an agreement by explicit user action."""
        if agreement.status in TERMINAL_STATUSES:
            raise InvalidEntityStateError(
                f"Agreement {agreement.agreement_id} is already {agreement.status.value}"
            )
        agreement.status = AgreementStatus.CANCELLED
        logger.info("Agreement %s cancelled", agreement.agreement_id)
        return agreement


@dataclass(frozen=True)
class AgreementsSummary:
    """Header figures of the agreements listing."""

    count: int
    total_original: Decimal
    total_agreed: Decimal
    average_discount_percent: Decimal


def agreements_summary(agreements: Sequence[Agreement]) -> AgreementsSummary:
    """Totals and mean discount over a list of agreements."""
    if not agreements:
        return AgreementsSummary(0, ZERO, ZERO, ZERO)
    discounts = [a.discount_percent for a in agreements]
    return AgreementsSummary(
        count=len(agreements),
        total_original=sum((a.original_amount for a in agreements), ZERO),
        total_agreed=sum((a.agreed_amount for a in agreements), ZERO),
        average_discount_percent=sum(discounts, ZERO) / len(discounts),
    )
