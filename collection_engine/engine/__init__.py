"""Title lifecycle and settlement engine."""

from collection_engine.engine.adjustments import AdjustmentResult, ChargeAdjuster, apply_to_title
from collection_engine.engine.aging import (
    AGING_BRACKETS,
    AgingBracket,
    AgingBucket,
    AgingClassifier,
    AgingReport,
    OverdueItem,
    aging_items_from_titles,
)
from collection_engine.engine.agreement import (
    AgreementCalculator,
    AgreementsSummary,
    agreements_summary,
    discount_percent,
)
from collection_engine.engine.campaign import CampaignAudience, CampaignFilter, select_audience
from collection_engine.engine.grouping import DebtGrouper
from collection_engine.engine.metrics import (
    ClientMetrics,
    DashboardStats,
    Debtor,
    MetricsCalculator,
    MonthlyCount,
    PortfolioReport,
    RecoveryGoal,
    UpcomingDue,
    month_key,
    risk_level_for,
)
from collection_engine.engine.scheduling import (
    InstallmentScheduler,
    ScheduledInstallment,
    SplitResult,
    schedule_drift,
)
from collection_engine.engine.status import StatusCorrection, StatusResolver, resolve_status

__all__ = [
    "AGING_BRACKETS",
    "AdjustmentResult",
    "AgingBracket",
    "AgingBucket",
    "AgingClassifier",
    "AgingReport",
    "AgreementCalculator",
    "AgreementsSummary",
    "CampaignAudience",
    "CampaignFilter",
    "ChargeAdjuster",
    "ClientMetrics",
    "DashboardStats",
    "DebtGrouper",
    "Debtor",
    "InstallmentScheduler",
    "MetricsCalculator",
    "MonthlyCount",
    "PortfolioReport",
    "OverdueItem",
    "RecoveryGoal",
    "ScheduledInstallment",
    "SplitResult",
    "StatusCorrection",
    "StatusResolver",
    "UpcomingDue",
    "agreements_summary",
    "aging_items_from_titles",
    "apply_to_title",
    "discount_percent",
    "month_key",
    "risk_level_for",
    "schedule_drift",
    "select_audience",
    "resolve_status",
]
