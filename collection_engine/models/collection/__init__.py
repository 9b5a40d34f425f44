"""Collection domain models."""

from collection_engine.models.collection.adjustment import Adjustment
from collection_engine.models.collection.agreement import (
    Agreement,
    AgreementInstallment,
    discount_percent,
)
from collection_engine.models.collection.debt import OPEN_STATUSES, ClientDebts, Debt
from collection_engine.models.collection.enums import (
    AdjustmentKind,
    AgreementStatus,
    AmountMode,
    ChargeKind,
    ContactChannel,
    PaymentMethod,
    RemainderPolicy,
    RiskLevel,
    TitleKind,
    TitleStatus,
)
from collection_engine.models.collection.title import Title, classify_kind

__all__ = [
    "Adjustment",
    "AdjustmentKind",
    "Agreement",
    "AgreementInstallment",
    "AgreementStatus",
    "AmountMode",
    "ChargeKind",
    "ClientDebts",
    "ContactChannel",
    "Debt",
    "OPEN_STATUSES",
    "PaymentMethod",
    "RemainderPolicy",
    "RiskLevel",
    "Title",
    "TitleKind",
    "TitleStatus",
    "classify_kind",
    "discount_percent",
]
