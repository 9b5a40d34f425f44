"""Audience selection for collection campaigns."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable

from collection_engine.engine.status import StatusResolver
from collection_engine.exceptions import ValidationError
from collection_engine.models.collection import Title, TitleKind, TitleStatus

logger = logging.getLogger(__name__)


@dataclass
class CampaignFilter:
    """Targeting criteria of a campaign.

    ``status`` of None means any open status. Ranges are inclusive.
    """

    status: TitleStatus | None = None
    min_days_overdue: int = 0
    max_days_overdue: int = 999
    min_value: Decimal = Decimal("0")
    max_value: Decimal = Decimal("999999")

    def validate(self) -> None:
        if self.min_days_overdue < 0:
            raise ValidationError("min_days_overdue cannot be negative", field="min_days_overdue")
        if self.max_days_overdue < self.min_days_overdue:
            raise ValidationError(
                "max_days_overdue cannot be less than min_days_overdue",
                field="max_days_overdue",
            )
        if self.max_value < self.min_value:
            raise ValidationError("max_value cannot be less than min_value", field="max_value")


@dataclass
class CampaignAudience:
    """Titles and clients matched by a campaign filter."""

    titles: list[Title] = field(default_factory=list)
    client_ids: list[str] = field(default_factory=list)

    @property
    def total_value(self) -> Decimal:
        return sum((t.outstanding_balance for t in self.titles), Decimal("0"))


def select_audience(
    titles: Iterable[Title],
    criteria: CampaignFilter,
    today: date,
    resolver: StatusResolver | None = None,
) -> CampaignAudience:
    """Pick the open titles (and their clients) matching ``criteria``.

    Days overdue count as 0 for titles not yet due. Clients keep the order
    in which their first matching title appears.
    """
    criteria.validate()
    resolver = resolver or StatusResolver()
    audience = CampaignAudience()
    seen: set[str] = set()

    for title in titles:
        if title.kind == TitleKind.PARENT:
            continue
        if not resolver.is_collectible(title, today):
            continue
        status = resolver.resolve(title, today)
        if criteria.status is not None and status != criteria.status:
            continue
        days = max(0, (today - title.due_date).days)
        if not criteria.min_days_overdue <= days <= criteria.max_days_overdue:
            continue
        if not criteria.min_value <= title.outstanding_balance <= criteria.max_value:
            continue
        audience.titles.append(title)
        if title.client_id not in seen:
            seen.add(title.client_id)
            audience.client_ids.append(title.client_id)

    logger.debug(
        "Campaign audience: %d titles across %d clients",
        len(audience.titles),
        len(audience.client_ids),
    )
    return audience
