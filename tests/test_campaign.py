"""Tests for campaign audience selection."""

from datetime import date
from decimal import Decimal

import pytest

from collection_engine.engine import CampaignFilter, select_audience
from collection_engine.exceptions import ValidationError
from collection_engine.models.collection import TitleStatus


@pytest.fixture
def titles(make_title) -> list:
    return [
        make_title("a1", amount="50.00", due_date=date(2025, 6, 5), client_id="a"),
        make_title("a2", amount="5000.00", due_date=date(2025, 3, 1), client_id="a"),
        make_title("b1", amount="200.00", due_date=date(2025, 6, 30), client_id="b"),
        make_title("c1", amount="80.00", due_date=date(2025, 5, 1), status=TitleStatus.PAID, client_id="c"),
        make_title("d1", amount="80.00", due_date=date(2025, 5, 1), status=TitleStatus.IN_AGREEMENT, client_id="d"),
    ]


class TestSelectAudience:
    """Tests for select_audience."""

    def test_default_filter_takes_all_open_titles(self, titles, today) -> None:
        audience = select_audience(titles, CampaignFilter(), today)

        assert [t.title_id for t in audience.titles] == ["a1", "a2", "b1"]
        assert audience.client_ids == ["a", "b"]
        assert audience.total_value == Decimal("5250.00")

    def test_overdue_only(self, titles, today) -> None:
        audience = select_audience(titles, CampaignFilter(status=TitleStatus.OVERDUE), today)
        assert [t.title_id for t in audience.titles] == ["a1", "a2"]

    def test_days_range(self, titles, today) -> None:
        criteria = CampaignFilter(min_days_overdue=5, max_days_overdue=30)
        audience = select_audience(titles, criteria, today)
        assert [t.title_id for t in audience.titles] == ["a1"]

    def test_value_range(self, titles, today) -> None:
        criteria = CampaignFilter(min_value=Decimal("100"), max_value=Decimal("1000"))
        assert select_audience(titles, criteria, today).client_ids == ["b"]

    @pytest.mark.parametrize(
        "criteria,field",
        [
            (CampaignFilter(min_days_overdue=-1), "min_days_overdue"),
            (CampaignFilter(min_days_overdue=10, max_days_overdue=5), "max_days_overdue"),
            (CampaignFilter(min_value=Decimal("10"), max_value=Decimal("1")), "max_value"),
        ],
    )
    def test_invalid_filter(self, titles, today, criteria, field) -> None:
        with pytest.raises(ValidationError) as exc_info:
            select_audience(titles, criteria, today)
        assert exc_info.value.field == field
