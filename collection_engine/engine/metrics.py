"""Portfolio and client metrics for dashboards and telecollection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, Sequence

from dateutil.relativedelta import relativedelta

from collection_engine.config import DashboardConfig
from collection_engine.engine.aging import AGING_BRACKETS, AgingBracket
from collection_engine.engine.status import StatusResolver
from collection_engine.exceptions import ValidationError
from collection_engine.models import Client, Contact
from collection_engine.models.collection import (
    Agreement,
    RiskLevel,
    Title,
    TitleKind,
    TitleStatus,
)
from collection_engine.money import HUNDRED, ZERO, percent_of

logger = logging.getLogger(__name__)

# One risk level per aging bracket, in bracket order
_RISK_BY_BRACKET = (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL)


@dataclass(frozen=True)
class ClientMetrics:
    """Telecollection summary for one client."""

    client_id: str
    total_debt: Decimal
    overdue_installments: int
    max_days_overdue: int
    last_contact: datetime | None
    days_since_last_contact: int | None
    risk_level: RiskLevel


@dataclass(frozen=True)
class DashboardStats:
    """Headline portfolio figures."""

    total_titles: int
    total_value: Decimal
    overdue_titles: int
    paid_titles: int
    recovered_value: Decimal
    default_rate: Decimal  # percent of titles overdue
    recovery_rate: Decimal  # percent of value recovered


@dataclass(frozen=True)
class UpcomingDue:
    """Unpaid title falling due soon."""

    title_id: str
    client_id: str
    client_name: str
    amount: Decimal
    due_date: date
    days_remaining: int


@dataclass(frozen=True)
class Debtor:
    """Client ranked by open balance."""

    client_id: str
    client_name: str
    total_value: Decimal
    total_titles: int


@dataclass(frozen=True)
class RecoveryGoal:
    """Progress towards a recovery target."""

    recovered: Decimal
    goal: Decimal
    progress_percent: Decimal  # capped at 100
    reached: bool


@dataclass(frozen=True)
class MonthlyCount:
    """Records created in one calendar month."""

    month: str  # YYYY-MM
    count: int


@dataclass(frozen=True)
class PortfolioReport:
    """Figures of the reports page."""

    total_titles: int
    total_value: Decimal
    titles_by_status: dict[str, int]
    titles_per_month: list[MonthlyCount]
    total_agreements: int
    total_agreed: Decimal
    agreements_per_month: list[MonthlyCount]


def month_key(moment: datetime) -> str:
    """Calendar month of a timestamp; aware values are bucketed in UTC."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m}"


def _monthly_counts(
    stamps: Iterable[datetime | None], months: list[str]
) -> list[MonthlyCount]:
    counts = dict.fromkeys(months, 0)
    for stamp in stamps:
        if stamp is None:
            continue
        key = month_key(stamp)
        if key in counts:
            counts[key] += 1
    return [MonthlyCount(month=m, count=counts[m]) for m in months]


def _obligations(titles: Iterable[Title]) -> list[Title]:
    # Parent headers duplicate their installments' value
    return [t for t in titles if t.kind != TitleKind.PARENT]


def risk_level_for(
    max_days_overdue: int,
    brackets: Sequence[AgingBracket] = AGING_BRACKETS,
) -> RiskLevel:
    """Map the largest delay to a risk level through the aging brackets."""
    if max_days_overdue <= 0:
        return RiskLevel.LOW
    for bracket, level in zip(brackets, _RISK_BY_BRACKET):
        if bracket.contains(max_days_overdue):
            return level
    return RiskLevel.CRITICAL


class MetricsCalculator:
    """Derived figures over titles, clients and contacts."""

    def __init__(
        self,
        config: DashboardConfig | None = None,
        resolver: StatusResolver | None = None,
    ) -> None:
        self.config = config or DashboardConfig()
        self._resolver = resolver or StatusResolver()

    def client_metrics(
        self,
        client_id: str,
        titles: Iterable[Title],
        today: date,
        contacts: Iterable[Contact] = (),
    ) -> ClientMetrics:
        """Open debt, overdue count, largest delay and contact recency."""
        total_debt = ZERO
        overdue = 0
        max_days = 0

        for title in _obligations(titles):
            if title.client_id != client_id:
                continue
            if not self._resolver.is_collectible(title, today):
                continue
            total_debt += title.outstanding_balance
            if self._resolver.resolve(title, today) == TitleStatus.OVERDUE:
                overdue += 1
                max_days = max(max_days, (today - title.due_date).days)

        last_contact = max(
            (c.occurred_at for c in contacts if c.client_id == client_id), default=None
        )
        days_since = (today - last_contact.date()).days if last_contact else None

        return ClientMetrics(
            client_id=client_id,
            total_debt=total_debt,
            overdue_installments=overdue,
            max_days_overdue=max_days,
            last_contact=last_contact,
            days_since_last_contact=days_since,
            risk_level=risk_level_for(max_days),
        )

    def dashboard(self, titles: Iterable[Title], today: date) -> DashboardStats:
        """Portfolio headline figures."""
        rows = _obligations(titles)
        total_value = sum((t.amount for t in rows), ZERO)
        paid = [t for t in rows if t.status == TitleStatus.PAID]
        overdue = [t for t in rows if t.status != TitleStatus.PAID and t.due_date < today]
        recovered = sum((t.amount for t in paid), ZERO)
        logger.debug(
            "Dashboard on %s: %d titles, %d overdue, %d paid", today, len(rows), len(overdue), len(paid)
        )

        return DashboardStats(
            total_titles=len(rows),
            total_value=total_value,
            overdue_titles=len(overdue),
            paid_titles=len(paid),
            recovered_value=recovered,
            default_rate=percent_of(Decimal(len(overdue)), Decimal(len(rows))),
            recovery_rate=percent_of(recovered, total_value),
        )

    def upcoming_dues(
        self,
        titles: Iterable[Title],
        today: date,
        clients: dict[str, Client] | None = None,
        window_days: int | None = None,
    ) -> list[UpcomingDue]:
        """Unpaid titles due between today and ``window_days`` ahead."""
        window = self.config.upcoming_window_days if window_days is None else window_days
        clients = clients or {}
        upcoming = []
        for title in _obligations(titles):
            if title.status in (TitleStatus.PAID, TitleStatus.IN_AGREEMENT):
                continue
            days = (title.due_date - today).days
            if 0 <= days <= window:
                client = clients.get(title.client_id)
                upcoming.append(
                    UpcomingDue(
                        title_id=title.title_id,
                        client_id=title.client_id,
                        client_name=client.name if client else "",
                        amount=title.outstanding_balance,
                        due_date=title.due_date,
                        days_remaining=days,
                    )
                )
        upcoming.sort(key=lambda u: (u.due_date, u.title_id))
        return upcoming

    def top_debtors(
        self,
        titles: Iterable[Title],
        today: date,
        clients: dict[str, Client] | None = None,
        limit: int | None = None,
    ) -> list[Debtor]:
        """Clients with the largest open balances."""
        limit = self.config.top_debtors_limit if limit is None else limit
        clients = clients or {}
        totals: dict[str, Decimal] = {}
        counts: dict[str, int] = {}
        for title in _obligations(titles):
            if not self._resolver.is_collectible(title, today):
                continue
            totals[title.client_id] = totals.get(title.client_id, ZERO) + title.outstanding_balance
            counts[title.client_id] = counts.get(title.client_id, 0) + 1

        ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:limit]
        return [
            Debtor(
                client_id=client_id,
                client_name=clients[client_id].name if client_id in clients else "",
                total_value=total,
                total_titles=counts[client_id],
            )
            for client_id, total in ranked
        ]

    def recovery_goal(self, recovered: Decimal, goal: Decimal | None = None) -> RecoveryGoal:
        """Progress towards the monthly recovery goal."""
        target = self.config.monthly_recovery_goal if goal is None else goal
        progress = min(percent_of(recovered, target), HUNDRED) if target > ZERO else ZERO
        return RecoveryGoal(
            recovered=recovered,
            goal=target,
            progress_percent=progress,
            reached=recovered >= target,
        )

    def reports(
        self,
        titles: Iterable[Title],
        agreements: Iterable[Agreement],
        today: date,
        months: int = 6,
    ) -> PortfolioReport:
        """Status breakdown and monthly creation counts for titles and agreements.

        Parameters
        ----------
        titles : Iterable[Title]
            Portfolio titles; parent headers are not counted.
        agreements : Iterable[Agreement]
            Agreements of the portfolio.
        today : date
            Last month of the window.
        months : int
            Window length in calendar months, oldest month first.

        Returns
        -------
        PortfolioReport
            Totals plus one ``MonthlyCount`` per month of the window.
        """
        if months < 1:
            raise ValidationError("months must be at least 1", field="months")

        rows = _obligations(titles)
        agreements = list(agreements)
        month_window = [f"{today - relativedelta(months=i):%Y-%m}" for i in reversed(range(months))]

        by_status = {status.value: 0 for status in TitleStatus}
        for title in rows:
            by_status[title.status.value] += 1

        return PortfolioReport(
            total_titles=len(rows),
            total_value=sum((t.amount for t in rows), ZERO),
            titles_by_status=by_status,
            titles_per_month=_monthly_counts((t.created_at for t in rows), month_window),
            total_agreements=len(agreements),
            total_agreed=sum((a.agreed_amount for a in agreements), ZERO),
            agreements_per_month=_monthly_counts((a.created_at for a in agreements), month_window),
        )
