"""Enumeration types for debt-collection entities."""

from enum import Enum


class TitleStatus(str, Enum):
    OPEN = "OPEN"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    IN_AGREEMENT = "IN_AGREEMENT"


class TitleKind(str, Enum):
    """Structural kind of a title row.

    STANDALONE: no parent and fewer than 2 installments.
    PARENT: debt header carrying ``total_installments >= 2``.
    INSTALLMENT: child row linked through ``parent_title_id``.
    """

    STANDALONE = "STANDALONE"
    PARENT = "PARENT"
    INSTALLMENT = "INSTALLMENT"


class AgreementStatus(str, Enum):
    ACTIVE = "ACTIVE"
    FULFILLED = "FULFILLED"
    BROKEN = "BROKEN"
    CANCELLED = "CANCELLED"


class ChargeKind(str, Enum):
    INTEREST = "INTEREST"  # juros
    PENALTY = "PENALTY"  # multa


class AdjustmentKind(str, Enum):
    INTEREST = "INTEREST"
    PENALTY = "PENALTY"
    DISCOUNT = "DISCOUNT"
    PAYMENT = "PAYMENT"


class AmountMode(str, Enum):
    FIXED = "FIXED"
    PERCENT = "PERCENT"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    PIX = "PIX"
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    BOLETO = "BOLETO"
    BANK_TRANSFER = "BANK_TRANSFER"
    CHECK = "CHECK"


class RemainderPolicy(str, Enum):
    """What to do with the cents lost when a principal is split."""

    NONE = "NONE"
    LAST_INSTALLMENT = "LAST_INSTALLMENT"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ContactChannel(str, Enum):
    PHONE = "PHONE"
    WHATSAPP = "WHATSAPP"
    SMS = "SMS"
    EMAIL = "EMAIL"
    VISIT = "VISIT"
