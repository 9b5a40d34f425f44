"""Balance adjustment audit records."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from collection_engine.models.collection.enums import AdjustmentKind, PaymentMethod


@dataclass
class Adjustment:
    """Auditable balance change applied to one installment."""

    adjustment_id: str
    kind: AdjustmentKind
    amount: Decimal  # always positive; kind gives the direction
    previous_balance: Decimal
    new_balance: Decimal
    description: str
    created_at: datetime
    title_id: str | None = None
    payment_method: PaymentMethod | None = None
    created_by: str | None = None
