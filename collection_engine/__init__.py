"""Title lifecycle and settlement engine for debt collection portfolios."""

from collection_engine.config import EngineConfig
from collection_engine.engine import (
    AgingClassifier,
    AgreementCalculator,
    ChargeAdjuster,
    DebtGrouper,
    InstallmentScheduler,
    MetricsCalculator,
    StatusResolver,
)
from collection_engine.exceptions import (
    CollectionEngineError,
    InconsistentDataError,
    ValidationError,
)
from collection_engine.logging import setup_logging

__version__ = "0.1.0"

__all__ = [
    "AgingClassifier",
    "AgreementCalculator",
    "ChargeAdjuster",
    "CollectionEngineError",
    "DebtGrouper",
    "EngineConfig",
    "InconsistentDataError",
    "InstallmentScheduler",
    "MetricsCalculator",
    "StatusResolver",
    "ValidationError",
    "setup_logging",
    "__version__",
]
