"""Charges, discounts and payments on a single installment balance."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

from collection_engine.exceptions import ValidationError
from collection_engine.models.collection import (
    Adjustment,
    AdjustmentKind,
    AmountMode,
    ChargeKind,
    PaymentMethod,
    Title,
    TitleStatus,
)
from collection_engine.money import HUNDRED, ZERO, round_currency, to_decimal

logger = logging.getLogger(__name__)

_DEFAULT_DESCRIPTIONS = {
    AdjustmentKind.INTEREST: "Juros aplicado",
    AdjustmentKind.PENALTY: "Multa aplicada",
    AdjustmentKind.DISCOUNT: "Desconto concedido",
    AdjustmentKind.PAYMENT: "Pagamento registrado",
}


@dataclass(frozen=True)
class AdjustmentResult:
    """New balance plus the audit record to persist alongside it."""

    new_balance: Decimal
    adjustment: Adjustment

    @property
    def settled(self) -> bool:
        return self.new_balance == ZERO


class ChargeAdjuster:
    """Apply ad-hoc charges, discounts and payments to a balance.

    Every call returns the new balance together with an ``Adjustment``
    describing the event; persisting both is the caller's job.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ) -> None:
        self._clock = clock
        self._id_factory = id_factory

    def compute_amount(self, current_balance: Any, amount_or_percent: Any, mode: AmountMode) -> Decimal:
        """Resolve a FIXED amount or a PERCENT of the balance to cents."""
        balance = to_decimal(current_balance, field="current_balance")
        value = to_decimal(amount_or_percent, field="amount_or_percent")
        if AmountMode(mode) == AmountMode.PERCENT:
            return round_currency(balance * value / HUNDRED)
        return round_currency(value)

    def apply_charge(
        self,
        current_balance: Any,
        kind: ChargeKind,
        amount_or_percent: Any,
        mode: AmountMode,
        description: str | None = None,
        title_id: str | None = None,
    ) -> AdjustmentResult:
        """Add interest (juros) or a penalty (multa) to the balance.

        Raises
        ------
        ValidationError
            If the computed charge is not positive.
        """
        balance = self._balance(current_balance)
        amount = self.compute_amount(balance, amount_or_percent, mode)
        if amount <= ZERO:
            raise ValidationError("charge amount must be greater than zero", field="amount")

        adjustment_kind = AdjustmentKind(ChargeKind(kind).value)
        return self._result(
            adjustment_kind, amount, balance, balance + amount, description, title_id
        )

    def apply_discount(
        self,
        current_balance: Any,
        amount_or_percent: Any,
        mode: AmountMode,
        description: str | None = None,
        title_id: str | None = None,
    ) -> AdjustmentResult:
        """Subtract a discount from the balance.

        Raises
        ------
        ValidationError
            If the discount is not positive or exceeds the balance.
        """
        balance = self._balance(current_balance)
        amount = self.compute_amount(balance, amount_or_percent, mode)
        if amount <= ZERO:
            raise ValidationError("discount amount must be greater than zero", field="amount")
        if amount > balance:
            raise ValidationError(
                "discount cannot exceed the outstanding balance", field="amount"
            )
        return self._result(
            AdjustmentKind.DISCOUNT,
            amount,
            balance,
            max(ZERO, balance - amount),
            description,
            title_id,
        )

    def register_payment(
        self,
        current_balance: Any,
        amount: Any,
        method: PaymentMethod = PaymentMethod.PIX,
        description: str | None = None,
        title_id: str | None = None,
    ) -> AdjustmentResult:
        """Register a (possibly partial) payment.

        Raises
        ------
        ValidationError
            If the amount is not positive or exceeds the balance.
        """
        balance = self._balance(current_balance)
        paid = round_currency(to_decimal(amount, field="amount"))
        if paid <= ZERO:
            raise ValidationError("payment amount must be greater than zero", field="amount")
        if paid > balance:
            raise ValidationError(
                "payment cannot exceed the outstanding balance", field="amount"
            )
        return self._result(
            AdjustmentKind.PAYMENT,
            paid,
            balance,
            balance - paid,
            description,
            title_id,
            payment_method=PaymentMethod(method),
        )

    def _balance(self, current_balance: Any) -> Decimal:
        balance = to_decimal(current_balance, field="current_balance")
        if balance < ZERO:
            raise ValidationError("current_balance cannot be negative", field="current_balance")
        return balance

    def _result(
        self,
        kind: AdjustmentKind,
        amount: Decimal,
        previous: Decimal,
        new_balance: Decimal,
        description: str | None,
        title_id: str | None,
        payment_method: PaymentMethod | None = None,
    ) -> AdjustmentResult:
        adjustment = Adjustment(
            adjustment_id=self._id_factory(),
            kind=kind,
            amount=amount,
            previous_balance=previous,
            new_balance=new_balance,
            description=description or _DEFAULT_DESCRIPTIONS[kind],
            created_at=self._clock(),
            title_id=title_id,
            payment_method=payment_method,
        )
        logger.debug(
            "%s of %s on %s: %s -> %s",
            kind.value,
            amount,
            title_id or "<balance>",
            previous,
            new_balance,
        )
        return AdjustmentResult(new_balance=new_balance, adjustment=adjustment)


def apply_to_title(title: Title, result: AdjustmentResult) -> Title:
    """Write an adjustment result onto an in-memory title.

    A payment that clears the balance marks the title PAID.
    """
    if result.adjustment.title_id not in (None, title.title_id):
        raise ValidationError(
            f"adjustment belongs to {result.adjustment.title_id}, not {title.title_id}",
            field="title_id",
        )
    title.balance = result.new_balance
    if result.adjustment.kind == AdjustmentKind.PAYMENT and result.settled:
        title.status = TitleStatus.PAID
    title.updated_at = result.adjustment.created_at
    return title
