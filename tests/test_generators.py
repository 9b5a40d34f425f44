"""Tests for synthetic portfolio generators."""

from datetime import date
from decimal import Decimal

from collection_engine.generators import (
    ClientGenerator,
    ContactGenerator,
    PaymentBehavior,
    TitleGenerator,
)
from collection_engine.models.collection import AdjustmentKind, TitleKind, TitleStatus

REFERENCE = date(2025, 6, 15)


class TestClientGenerator:
    """Tests for ClientGenerator."""

    def test_generate(self, seed: int) -> None:
        client = ClientGenerator(seed=seed).generate()

        assert client.client_id
        assert client.name
        assert len(client.tax_id) in (14, 18)  # formatted CPF or CNPJ
        assert client.state and len(client.state) == 2

    def test_batch(self, seed: int) -> None:
        clients = list(ClientGenerator(seed=seed).generate_batch(5))
        assert len({c.client_id for c in clients}) == 5

    def test_reproducible(self, seed: int) -> None:
        first = ClientGenerator(seed=seed).generate()
        second = ClientGenerator(seed=seed).generate()
        assert (first.client_id, first.name) == (second.client_id, second.name)


class TestTitleGenerator:
    """Tests for TitleGenerator."""

    def test_standalone(self, seed: int) -> None:
        title = TitleGenerator(seed=seed).generate_standalone("c1", REFERENCE)

        assert title.kind == TitleKind.STANDALONE
        assert title.status == TitleStatus.OPEN
        assert Decimal("50") <= title.amount <= Decimal("5000")
        assert title.balance == title.amount
        assert len(title.document_number) == 6

    def test_split(self, seed: int) -> None:
        split = TitleGenerator(seed=seed).generate_split("c1", REFERENCE)

        assert split.parent.kind == TitleKind.PARENT
        assert len(split.installments) == split.parent.total_installments
        assert all(t.parent_title_id == split.parent.title_id for t in split.installments)
        drift = split.parent.amount - sum(t.amount for t in split.installments)
        assert abs(drift) <= Decimal("0.005") * len(split.installments)

    def test_parents_precede_children(self, seed: int) -> None:
        titles = TitleGenerator(seed=seed).generate_for_client("c1", REFERENCE, max_titles=6, split_rate=1.0)

        seen = set()
        for title in titles:
            if title.parent_title_id:
                assert title.parent_title_id in seen
            seen.add(title.title_id)


class TestContactGenerator:
    def test_contacts_within_last_60_days(self, seed: int) -> None:
        gen = ContactGenerator(seed=seed)
        contacts = [c for _ in range(10) for c in gen.generate_for_client("c1", REFERENCE)]

        assert contacts
        assert all(0 <= (REFERENCE - c.occurred_at.date()).days <= 60 for c in contacts)


class TestPaymentBehavior:
    """Tests for PaymentBehavior."""

    def test_only_due_titles_adjusted(self, seed: int, make_title) -> None:
        titles = [
            make_title("past1", due_date=date(2025, 4, 1)),
            make_title("past2", due_date=date(2025, 5, 1)),
            make_title("future", due_date=date(2025, 8, 1)),
        ]

        results = PaymentBehavior(seed=seed).apply_payment_behavior(titles, REFERENCE)

        assert {r.adjustment.title_id for r in results} <= {"past1", "past2"}
        for result in results:
            assert result.adjustment.kind in (AdjustmentKind.PAYMENT, AdjustmentKind.PENALTY)
            assert result.adjustment.created_at.date() <= REFERENCE

    def test_good_payers_settle_everything(self, seed: int, make_title) -> None:
        titles = [make_title(f"t{i}", due_date=date(2025, i, 1)) for i in range(1, 6)]

        results = PaymentBehavior(seed=seed).apply_payment_behavior(
            titles, REFERENCE, on_time_rate=1.0, late_rate=0.0, default_rate=0.0
        )

        assert len(results) == 5
        assert all(r.settled for r in results)

    def test_defaulters_get_penalties(self, seed: int, make_title) -> None:
        titles = [make_title(f"t{i}", due_date=date(2025, i, 1)) for i in range(1, 7)]

        results = PaymentBehavior(seed=seed).apply_payment_behavior(
            titles, REFERENCE, on_time_rate=0.0, late_rate=0.0, default_rate=1.0
        )

        kinds = [r.adjustment.kind for r in results]
        assert kinds.count(AdjustmentKind.PENALTY) >= 3
        penalty = next(r for r in results if r.adjustment.kind == AdjustmentKind.PENALTY)
        assert penalty.adjustment.amount == Decimal("2.00")

    def test_uses_given_id_factory(self, seed: int, make_title) -> None:
        ids = iter(["a", "b"])
        behavior = PaymentBehavior(seed=seed, id_factory=lambda: next(ids))
        results = behavior.apply_payment_behavior(
            [make_title("t1", due_date=date(2025, 1, 1))], REFERENCE,
            on_time_rate=1.0, late_rate=0.0, default_rate=0.0,
        )
        assert results[0].adjustment.adjustment_id == "a"

    def test_results_apply_cleanly(self, seed: int, make_title) -> None:
        """Each result starts from the title's current balance."""
        title = make_title("t1", amount="120.00", due_date=date(2025, 1, 1))
        result = PaymentBehavior(seed=seed).apply_payment_behavior(
            [title], REFERENCE, on_time_rate=1.0, late_rate=0.0, default_rate=0.0
        )[0]
        assert result.adjustment.previous_balance == Decimal("120.00")
        assert result.new_balance == Decimal("0.00")
