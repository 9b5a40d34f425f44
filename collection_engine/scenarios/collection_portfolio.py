"""Collection portfolio scenario: debtors, titles, payments and agreements."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from collection_engine.config import EngineConfig
from collection_engine.engine import (
    AgingClassifier,
    AgreementCalculator,
    DebtGrouper,
    MetricsCalculator,
    StatusCorrection,
    StatusResolver,
    aging_items_from_titles,
    agreements_summary,
)
from collection_engine.exceptions import ValidationError
from collection_engine.generators import (
    ClientGenerator,
    ContactGenerator,
    PaymentBehavior,
    TitleGenerator,
)
from collection_engine.models.collection import AdjustmentKind, TitleKind
from collection_engine.money import round_currency
from collection_engine.sinks.serialization import make_event
from collection_engine.store import PortfolioStore

logger = logging.getLogger(__name__)


def _offset(seed: int | None, n: int) -> int | None:
    return None if seed is None else seed + n


class CollectionPortfolioScenario:
    """Generate a collection portfolio and run the engine over it.

    This scenario creates:
    - Debtors with standalone titles and debts split into installments
    - Payment history (full, partial and missed payments, late penalties)
    - Status reconciliation of titles past their due date
    - Settlement agreements for part of the overdue debtors
    """

    AGREEMENT_COUNTS = [1, 3, 6, 10, 12]

    def __init__(
        self,
        num_clients: int = 100,
        split_rate: float = 0.35,
        agreement_rate: float = 0.2,
        reference_date: date | None = None,
        seed: int | None = None,
        *,
        config: EngineConfig | None = None,
    ) -> None:
        """Initialize collection portfolio scenario.

        Parameters
        ----------
        num_clients : int
            Number of debtors to generate.
        split_rate : float
            Probability that a generated debt is split into installments.
        agreement_rate : float
            Share of debtors with overdue debts who sign an agreement.
        reference_date : date | None
            The scenario's "today". Defaults to the current date.
        seed : int | None
            Random seed for reproducibility. Overrides ``config.seed``.
        config : EngineConfig | None
            Engine configuration (limits, dashboard parameters).
        """
        self.config = config or EngineConfig()
        self.seed = seed if seed is not None else self.config.seed
        self.num_clients = num_clients
        self.split_rate = split_rate
        self.agreement_rate = agreement_rate
        self.today = reference_date or date.today()

        if self.seed is not None:
            random.seed(self.seed)

        self.store = PortfolioStore()
        self.corrections: list[StatusCorrection] = []

        # Offset seeds so generated ids differ across entity types
        self._client_gen = ClientGenerator(seed=_offset(self.seed, 0))
        self._title_gen = TitleGenerator(
            seed=_offset(self.seed, 1), scheduling=self.config.scheduling
        )
        self._contact_gen = ContactGenerator(seed=_offset(self.seed, 2))
        self._payment_behavior = PaymentBehavior(seed=self.seed, id_factory=self._title_gen.new_id)

        self._resolver = StatusResolver()
        self._grouper = DebtGrouper(self._resolver)
        self._aging = AgingClassifier()
        self._agreements = AgreementCalculator(self.config.agreement)
        self._metrics = MetricsCalculator(self.config.dashboard, self._resolver)

    def generate(self) -> PortfolioStore:
        """Generate all data for the portfolio scenario.

        Returns
        -------
        PortfolioStore
            Store containing all generated data.
        """
        logger.info(
            "Starting collection portfolio scenario: %d clients as of %s",
            self.num_clients,
            self.today,
        )

        for client in self._client_gen.generate_batch(self.num_clients):
            self.store.add_client(client)
            for title in self._title_gen.generate_for_client(
                client.client_id, self.today, split_rate=self.split_rate
            ):
                self.store.add_title(title)
            for contact in self._contact_gen.generate_for_client(client.client_id, self.today):
                self.store.add_contact(contact)

        logger.info(
            "Generated %d clients with %d titles", len(self.store.clients), len(self.store.titles)
        )

        self._apply_payments()

        self.corrections = self._resolver.reconcile(self.store.titles.values(), self.today)
        self.store.apply_corrections(self.corrections)

        self._create_agreements()

        logger.info("Scenario complete: %s", self.store.summary())
        return self.store

    def _apply_payments(self) -> None:
        """Replay payment behaviour per client through the store."""
        for client_id in self.store.clients:
            payable = [
                t for t in self.store.get_client_titles(client_id) if t.kind != TitleKind.PARENT
            ]
            for result in self._payment_behavior.apply_payment_behavior(payable, self.today):
                self.store.record_adjustment(result)

        payments = sum(1 for a in self.store.adjustments if a.kind == AdjustmentKind.PAYMENT)
        logger.info(
            "Recorded %d adjustments (%d payments)", len(self.store.adjustments), payments
        )

    def _create_agreements(self) -> None:
        """Settle part of the overdue debts with discounted agreements."""
        for client_id in self.store.clients:
            debts = [
                d
                for d in self._grouper.group(self.store.get_client_titles(client_id), self.today)
                if d.has_overdue
            ]
            if not debts or random.random() >= self.agreement_rate:
                continue

            outstanding = sum(d.total_outstanding for d in debts)
            discount = Decimal(random.randint(0, 30))
            agreed = round_currency(outstanding * (100 - discount) / 100)
            try:
                agreement = self._agreements.create_agreement(
                    client_id,
                    debts,
                    agreed,
                    random.choice(self.AGREEMENT_COUNTS),
                    self.today + timedelta(days=random.randint(5, 15)),
                    created_at=datetime.combine(self.today, time(10)),
                    notes=f"Desconto negociado de {discount}%",
                    id_factory=self._title_gen.new_id,
                )
            except ValidationError as e:
                logger.warning("Skipping agreement for client %s: %s", client_id, e)
                continue
            self.store.add_agreement(agreement)

        logger.info("Created %d agreements", len(self.store.agreements))

    def export(self, sinks: list[Any]) -> None:
        """Export generated data to sinks.

        Parameters
        ----------
        sinks : list[Any]
            Sink instances exposing ``write_batch`` (ConsoleSink,
            JsonFileSink).
        """
        events = [
            make_event("title.status_corrected", c.title_id, c) for c in self.corrections
        ] + [
            make_event("agreement.created", a.agreement_id, a, event_time=a.created_at)
            for a in self.store.agreements.values()
        ]

        for sink in sinks:
            sink.write_batch("clients", list(self.store.clients.values()))
            sink.write_batch("titles", list(self.store.titles.values()))
            sink.write_batch("adjustments", self.store.adjustments)
            sink.write_batch("agreements", list(self.store.agreements.values()))
            sink.write_batch("contacts", self.store.contacts)
            sink.write_batch("events", events)

        logger.info("Exported collection portfolio to %d sinks", len(sinks))

    def get_portfolio_summary(self) -> dict[str, Any]:
        """Get summary statistics for the collection portfolio.

        Returns
        -------
        dict[str, Any]
            Counts, effective status distribution, debts, aging,
            dashboard figures and agreement totals.
        """
        titles = list(self.store.titles.values())
        if not titles:
            return {}

        statuses = self._resolver.resolve_many(
            (t for t in titles if t.kind != TitleKind.PARENT), self.today
        )
        status_counts: dict[str, int] = {}
        for status in statuses.values():
            status_counts[status.value] = status_counts.get(status.value, 0) + 1

        client_debts = self._grouper.group_by_client(titles, self.today, self.store.clients)
        debts = [d for cd in client_debts for d in cd.debts]

        aging = self._aging.build_report(aging_items_from_titles(titles, self.today), self.today)
        dashboard = self._metrics.dashboard(titles, self.today)

        month_start = self.today.replace(day=1)
        recovered = sum(
            (
                a.amount
                for a in self.store.adjustments
                if a.kind == AdjustmentKind.PAYMENT and a.created_at.date() >= month_start
            ),
            Decimal("0"),
        )

        return {
            "reference_date": self.today,
            "entities": self.store.summary(),
            "status_distribution": status_counts,
            "status_corrections": len(self.corrections),
            "open_debts": len(debts),
            "split_debts": sum(1 for d in debts if d.is_split),
            "overdue_debts": sum(1 for d in debts if d.has_overdue),
            "total_outstanding": sum((cd.total_outstanding for cd in client_debts), Decimal("0")),
            "aging": aging,
            "dashboard": dashboard,
            "agreements": agreements_summary(list(self.store.agreements.values())),
            "top_debtors": self._metrics.top_debtors(titles, self.today, self.store.clients),
            "upcoming_dues": self._metrics.upcoming_dues(titles, self.today, self.store.clients),
            "recovery_goal": self._metrics.recovery_goal(recovered),
            "reports": self._metrics.reports(titles, self.store.agreements.values(), self.today),
        }
