"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import Callable

import pytest

from collection_engine.models import Client
from collection_engine.models.collection import Title, TitleStatus


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def today() -> date:
    """Fixed reference day; engines never read the clock."""
    return date(2025, 6, 15)


@pytest.fixture
def sample_client_id() -> str:
    """Sample client ID."""
    return "client-test-001"


@pytest.fixture
def sample_client(sample_client_id: str) -> Client:
    """Sample client."""
    return Client(
        client_id=sample_client_id,
        name="Maria Silva",
        tax_id="123.456.789-09",
        phone="(11) 98765-4321",
        email="maria@example.com",
        city="São Paulo",
        state="SP",
    )


@pytest.fixture
def make_title(sample_client_id: str) -> Callable[..., Title]:
    """Factory for titles with sensible defaults."""

    def _make(
        title_id: str,
        amount: str = "100.00",
        due_date: date = date(2025, 7, 1),
        status: TitleStatus = TitleStatus.OPEN,
        client_id: str | None = None,
        **kwargs,
    ) -> Title:
        return Title(
            title_id=title_id,
            client_id=client_id or sample_client_id,
            amount=Decimal(amount),
            due_date=due_date,
            status=status,
            **kwargs,
        )

    return _make
