"""Synthetic debtors, titles and payment behaviour for collection portfolios."""

from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Callable, Iterator

from collection_engine.config import SchedulingConfig
from collection_engine.engine.adjustments import AdjustmentResult, ChargeAdjuster
from collection_engine.engine.scheduling import InstallmentScheduler, SplitResult
from collection_engine.generators.base import BaseGenerator
from collection_engine.models import Client, Contact
from collection_engine.models.collection import (
    AmountMode,
    ChargeKind,
    ContactChannel,
    PaymentMethod,
    Title,
    TitleStatus,
)
from collection_engine.money import round_currency


class ClientGenerator(BaseGenerator):
    """Generate synthetic debtors (pessoa fisica and juridica)."""

    COMPANY_RATE = 0.2

    def generate(self) -> Client:
        """Generate a single client.

        Returns
        -------
        Client
            Generated client.
        """
        if random.random() < self.COMPANY_RATE:
            name = self.fake.company()
            tax_id = self.fake.cnpj()
        else:
            name = self.fake.name()
            tax_id = self.fake.cpf()

        return Client(
            client_id=self.new_id(),
            name=name,
            tax_id=tax_id,
            phone=self.fake.cellphone_number(),
            email=self.fake.email(),
            city=self.fake.city(),
            state=self.fake.estado_sigla(),
            created_at=datetime.now() - timedelta(days=random.randint(30, 720)),
        )

    def generate_batch(self, count: int) -> Iterator[Client]:
        """Generate multiple clients.

        Parameters
        ----------
        count : int
            Number of clients to generate.

        Yields
        ------
        Client
            Generated clients.
        """
        for _ in range(count):
            yield self.generate()


class TitleGenerator(BaseGenerator):
    """Generate receivable titles, standalone or split into installments."""

    DESCRIPTIONS = [
        "Mensalidade",
        "Prestação de serviços",
        "Venda de mercadorias",
        "Manutenção",
        "Consultoria",
        "Aluguel",
    ]
    INSTALLMENT_COUNTS = [2, 3, 4, 6, 10, 12]
    INTERVALS = [15, 30, 30, 30]

    def __init__(
        self,
        seed: int | None = None,
        scheduling: SchedulingConfig | None = None,
    ) -> None:
        super().__init__(seed)
        self._scheduler = InstallmentScheduler(scheduling)

    def generate_standalone(self, client_id: str, reference_date: date) -> Title:
        """Generate a single title due within roughly six months of ``reference_date``."""
        amount = Decimal(random.randint(5000, 500000)) / 100
        due_date = reference_date + timedelta(days=random.randint(-180, 60))
        return Title(
            title_id=self.new_id(),
            client_id=client_id,
            amount=amount,
            due_date=due_date,
            status=TitleStatus.OPEN,
            document_number=self._document_number(),
            description=random.choice(self.DESCRIPTIONS),
            created_at=datetime.combine(due_date - timedelta(days=30), time(9)),
        )

    def generate_split(self, client_id: str, reference_date: date) -> SplitResult:
        """Generate a debt already split into installments."""
        principal = Decimal(random.randint(500, 20000))
        count = random.choice(self.INSTALLMENT_COUNTS)
        interval = random.choice(self.INTERVALS)
        start = reference_date - timedelta(days=random.randint(0, 240))
        return self._scheduler.split_title(
            client_id,
            principal,
            count,
            start,
            interval_days=interval,
            description=random.choice(self.DESCRIPTIONS),
            document_number=self._document_number(),
            id_factory=self.new_id,
            created_at=datetime.combine(start - timedelta(days=7), time(9)),
        )

    def generate_for_client(
        self,
        client_id: str,
        reference_date: date,
        max_titles: int = 4,
        split_rate: float = 0.35,
    ) -> list[Title]:
        """Titles for one client, parents listed before their installments.

        Parameters
        ----------
        client_id : str
            Owner of the titles.
        reference_date : date
            Date the due dates are spread around.
        max_titles : int
            Upper bound of debts generated.
        split_rate : float
            Probability that a debt is split into installments.

        Returns
        -------
        list[Title]
            Generated rows, ready to be stored in order.
        """
        titles: list[Title] = []
        for _ in range(random.randint(1, max_titles)):
            if random.random() < split_rate:
                titles.extend(self.generate_split(client_id, reference_date).titles)
            else:
                titles.append(self.generate_standalone(client_id, reference_date))
        return titles

    def _document_number(self) -> str:
        return f"{random.randint(1, 999999):06d}"


class ContactGenerator(BaseGenerator):
    """Generate telecollection contacts."""

    CHANNELS = list(ContactChannel)
    CHANNEL_WEIGHTS = [0.35, 0.35, 0.1, 0.15, 0.05]
    NOTES = [
        "Cliente prometeu pagamento",
        "Sem resposta",
        "Solicitou segunda via",
        "Negociação em andamento",
    ]

    def generate_for_client(self, client_id: str, reference_date: date) -> list[Contact]:
        """Zero to three contacts within the last 60 days."""
        contacts = []
        for _ in range(random.randint(0, 3)):
            occurred = reference_date - timedelta(days=random.randint(0, 60))
            contacts.append(
                Contact(
                    client_id=client_id,
                    occurred_at=datetime.combine(occurred, time(random.randint(8, 18))),
                    channel=random.choices(self.CHANNELS, weights=self.CHANNEL_WEIGHTS, k=1)[0],
                    notes=random.choice(self.NOTES),
                )
            )
        return contacts


class PaymentBehavior:
    """Simulate how debtors pay titles that are already due.

    Produces payment and penalty adjustments rather than touching the
    titles, so the store records the full history.
    """

    PENALTY_PERCENT = Decimal("2")
    METHODS = [PaymentMethod.PIX, PaymentMethod.BOLETO, PaymentMethod.BANK_TRANSFER, PaymentMethod.CASH]

    def __init__(
        self,
        seed: int | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        if seed is not None:
            random.seed(seed)
        self._id_factory = id_factory

    def apply_payment_behavior(
        self,
        titles: list[Title],
        reference_date: date,
        on_time_rate: float = 0.6,
        late_rate: float = 0.25,
        default_rate: float = 0.15,
    ) -> list[AdjustmentResult]:
        """Build the adjustments one debtor's history would have produced.

        Parameters
        ----------
        titles : list[Title]
            One client's payable titles (no parent headers).
        reference_date : date
            Current date; titles due later are left untouched.
        on_time_rate : float
            Weight of debtors who pay everything.
        late_rate : float
            Weight of debtors who pay most titles, some partially.
        default_rate : float
            Weight of debtors who stop paying after a few titles.

        Returns
        -------
        list[AdjustmentResult]
            Adjustments in chronological order per title.
        """
        behavior = random.choices(
            ["good", "late", "defaulter"],
            weights=[on_time_rate, late_rate, default_rate],
            k=1,
        )[0]
        stop_after = random.randint(1, 3)

        results = []
        due = sorted((t for t in titles if t.due_date <= reference_date), key=lambda t: t.due_date)
        for position, title in enumerate(due, start=1):
            if title.status != TitleStatus.OPEN:
                continue
            balance = title.outstanding_balance

            if behavior == "good":
                paid_on = title.due_date + timedelta(days=random.randint(0, 3))
                results.append(self._payment(title, balance, min(paid_on, reference_date)))

            elif behavior == "late":
                roll = random.random()
                paid_on = min(title.due_date + timedelta(days=random.randint(5, 40)), reference_date)
                if roll < 0.6:
                    results.append(self._payment(title, balance, paid_on))
                elif roll < 0.85:
                    partial = round_currency(balance * Decimal(random.randint(20, 70)) / 100)
                    if partial > 0:
                        results.append(self._payment(title, partial, paid_on))

            elif position <= stop_after:
                paid_on = title.due_date + timedelta(days=random.randint(0, 15))
                results.append(self._payment(title, balance, min(paid_on, reference_date)))
            else:
                results.append(self._penalty(title, title.due_date + timedelta(days=1)))

        return results

    def _adjuster(self, on: date) -> ChargeAdjuster:
        stamp = datetime.combine(on, time(12))
        if self._id_factory is None:
            return ChargeAdjuster(clock=lambda: stamp)
        return ChargeAdjuster(clock=lambda: stamp, id_factory=self._id_factory)

    def _payment(self, title: Title, amount: Decimal, paid_on: date) -> AdjustmentResult:
        return self._adjuster(paid_on).register_payment(
            title.outstanding_balance,
            amount,
            method=random.choice(self.METHODS),
            title_id=title.title_id,
        )

    def _penalty(self, title: Title, charged_on: date) -> AdjustmentResult:
        return self._adjuster(charged_on).apply_charge(
            title.outstanding_balance,
            ChargeKind.PENALTY,
            self.PENALTY_PERCENT,
            AmountMode.PERCENT,
            title_id=title.title_id,
        )
