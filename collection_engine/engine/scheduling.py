"""Installment schedules for split debts."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Callable

from collection_engine.config import SchedulingConfig
from collection_engine.exceptions import ValidationError
from collection_engine.models.collection import RemainderPolicy, Title, TitleStatus
from collection_engine.money import CENT, ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledInstallment:
    """One generated installment."""

    number: int
    amount: Decimal
    due_date: date


@dataclass
class SplitResult:
    """Rows to persist when a debt is split."""

    parent: Title
    installments: list[Title]

    @property
    def titles(self) -> list[Title]:
        return [self.parent, *self.installments]


def _new_id() -> str:
    return uuid.uuid4().hex


class InstallmentScheduler:
    """Split a principal into equally spaced installments.

    Each installment is ``round(principal / count)`` (half-up, cents) and
    falls ``interval_days`` after the previous one. With
    ``RemainderPolicy.NONE`` the rounded amounts may drift from the
    principal by at most ``count * 0.005``; ``LAST_INSTALLMENT`` moves the
    difference onto the final installment.
    """

    def __init__(self, config: SchedulingConfig | None = None) -> None:
        self.config = config or SchedulingConfig()

    def schedule(
        self,
        principal: Any,
        count: int,
        start_date: date,
        interval_days: int,
        remainder_policy: RemainderPolicy | None = None,
    ) -> list[ScheduledInstallment]:
        """Generate the installment cronograma.

        Parameters
        ----------
        principal : Decimal | int | float | str
            Amount to split, must be positive.
        count : int
            Number of installments, at least 2.
        start_date : date
            Due date of the first installment.
        interval_days : int
            Days between consecutive installments, at least 1.
        remainder_policy : RemainderPolicy | None
            Overrides the configured policy.

        Returns
        -------
        list[ScheduledInstallment]
            ``count`` installments numbered from 1.

        Raises
        ------
        ValidationError
            If any precondition is violated.
        """
        amount = to_decimal(principal, field="principal")
        if amount <= ZERO:
            raise ValidationError("principal must be greater than zero", field="principal")
        if count is None or count < 2:
            raise ValidationError("count must be at least 2", field="count")
        if interval_days is None or interval_days < 1:
            raise ValidationError("interval_days must be at least 1", field="interval_days")
        if start_date is None:
            raise ValidationError("start_date is required", field="start_date")

        policy = remainder_policy or self.config.remainder_policy
        per_installment = round_currency(amount / count)
        if per_installment < CENT:
            raise ValidationError(
                f"count of {count} leaves installments below one cent", field="count"
            )

        amounts = [per_installment] * count
        if policy == RemainderPolicy.LAST_INSTALLMENT:
            amounts[-1] = amount - per_installment * (count - 1)
            if amounts[-1] <= ZERO:
                raise ValidationError(
                    f"rounding {amount} into {count} installments leaves nothing for the last one",
                    field="count",
                )

        installments = [
            ScheduledInstallment(
                number=i + 1,
                amount=amounts[i],
                due_date=start_date + timedelta(days=i * interval_days),
            )
            for i in range(count)
        ]

        logger.debug(
            "Scheduled %s into %d installments of %s every %d days (drift %s)",
            amount,
            count,
            per_installment,
            interval_days,
            schedule_drift(installments, amount),
        )
        return installments

    def split_title(
        self,
        client_id: str,
        principal: Any,
        count: int,
        start_date: date,
        interval_days: int | None = None,
        status: TitleStatus = TitleStatus.OPEN,
        description: str | None = None,
        document_number: str | None = None,
        id_factory: Callable[[], str] = _new_id,
        created_at: datetime | None = None,
    ) -> SplitResult:
        """Build the parent header and installment rows for a split debt.

        Enforces the configured upper limits on installment count and
        interval on top of the ``schedule`` preconditions.
        """
        if not client_id:
            raise ValidationError("client_id is required", field="client_id")
        if interval_days is None:
            interval_days = self.config.default_interval_days
        if count is not None and count > self.config.max_installments:
            raise ValidationError(
                f"count cannot exceed {self.config.max_installments}", field="count"
            )
        if interval_days > self.config.max_interval_days:
            raise ValidationError(
                f"interval_days cannot exceed {self.config.max_interval_days}",
                field="interval_days",
            )

        rows = self.schedule(principal, count, start_date, interval_days)
        amount = to_decimal(principal, field="principal")
        base_description = (description or "").strip()

        parent = Title(
            title_id=id_factory(),
            client_id=client_id,
            amount=amount,
            due_date=start_date,
            status=TitleStatus.OPEN,
            total_installments=count,
            original_amount=amount,
            document_number=document_number,
            description=f"{base_description} - Dívida parcelada em {count}x".strip(" -"),
            created_at=created_at,
        )

        installments = [
            Title(
                title_id=id_factory(),
                client_id=client_id,
                amount=row.amount,
                due_date=row.due_date,
                status=status,
                parent_title_id=parent.title_id,
                installment_number=row.number,
                total_installments=count,
                original_amount=amount,
                document_number=document_number,
                description=f"{base_description} - Parcela {row.number}/{count}".strip(" -"),
                created_at=created_at,
            )
            for row in rows
        ]

        logger.info(
            "Split debt %s for client %s into %d installments", parent.title_id, client_id, count
        )
        return SplitResult(parent=parent, installments=installments)


def schedule_drift(installments: list[ScheduledInstallment], principal: Decimal) -> Decimal:
    """Return ``principal - sum(amounts)``."""
    return principal - sum((i.amount for i in installments), ZERO)
