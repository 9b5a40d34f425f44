"""Collection portfolio store with referential integrity."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from collection_engine.engine.adjustments import AdjustmentResult, apply_to_title
from collection_engine.engine.scheduling import SplitResult
from collection_engine.engine.status import StatusCorrection
from collection_engine.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
)
from collection_engine.models import Client, Contact
from collection_engine.models.collection import (
    OPEN_STATUSES,
    Adjustment,
    Agreement,
    Title,
    TitleKind,
    TitleStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class PortfolioStore:
    """In-memory stand-in for the external store.

    Holds the records the engine reads and the outputs it produces
    (status corrections, split rows, agreements, adjustments).
    """

    clients: dict[str, Client] = field(default_factory=dict)
    titles: dict[str, Title] = field(default_factory=dict)
    agreements: dict[str, Agreement] = field(default_factory=dict)
    adjustments: list[Adjustment] = field(default_factory=list)
    contacts: list[Contact] = field(default_factory=list)

    # Relationship indexes
    _client_titles: dict[str, list[str]] = field(default_factory=dict)
    _children: dict[str, list[str]] = field(default_factory=dict)
    _client_agreements: dict[str, list[str]] = field(default_factory=dict)
    _title_adjustments: dict[str, list[int]] = field(default_factory=dict)

    def add_client(self, client: Client) -> None:
        """Add a client to the store."""
        if client.created_at is None:
            client.created_at = datetime.now()
        self.clients[client.client_id] = client
        self._client_titles.setdefault(client.client_id, [])
        self._client_agreements.setdefault(client.client_id, [])

    def add_title(self, title: Title) -> None:
        """Add a title to the store.

        Installments must reference a stored parent of the same client.
        """
        if title.client_id not in self.clients:
            raise ReferentialIntegrityError(f"Client {title.client_id} not found")

        if title.parent_title_id is not None:
            parent = self.titles.get(title.parent_title_id)
            if parent is None:
                raise ReferentialIntegrityError(f"Parent title {title.parent_title_id} not found")
            if parent.client_id != title.client_id:
                raise InvalidEntityStateError(
                    f"Title {title.title_id} and parent {parent.title_id} belong to different clients"
                )
            self._children.setdefault(parent.title_id, []).append(title.title_id)

        if title.created_at is None:
            title.created_at = datetime.now()
        self.titles[title.title_id] = title
        self._client_titles[title.client_id].append(title.title_id)

    def add_split(self, split: SplitResult) -> None:
        """Store a parent header and its generated installments."""
        self.add_title(split.parent)
        for installment in split.installments:
            self.add_title(installment)

    def add_contact(self, contact: Contact) -> None:
        """Record a telecollection contact."""
        if contact.client_id not in self.clients:
            raise ReferentialIntegrityError(f"Client {contact.client_id} not found")
        self.contacts.append(contact)

    def add_agreement(self, agreement: Agreement) -> list[Title]:
        """Store an agreement and move its open titles to IN_AGREEMENT.

        Returns
        -------
        list[Title]
            Titles whose status changed.
        """
        if agreement.client_id not in self.clients:
            raise ReferentialIntegrityError(f"Client {agreement.client_id} not found")

        covered = []
        for title_id in agreement.title_ids:
            title = self.get_title(title_id)
            if title.client_id != agreement.client_id:
                raise InvalidEntityStateError(
                    f"Title {title_id} does not belong to client {agreement.client_id}"
                )
            covered.append(title)

        self.agreements[agreement.agreement_id] = agreement
        self._client_agreements[agreement.client_id].append(agreement.agreement_id)

        changed = []
        for title in covered:
            if title.status in OPEN_STATUSES:
                title.status = TitleStatus.IN_AGREEMENT
                changed.append(title)
        logger.info(
            "Stored agreement %s covering %d titles", agreement.agreement_id, len(changed)
        )
        return changed

    def record_adjustment(self, result: AdjustmentResult) -> Title:
        """Persist an adjustment and the resulting title balance."""
        title_id = result.adjustment.title_id
        if title_id is None:
            raise InvalidEntityStateError("Adjustment has no title_id")
        title = self.get_title(title_id)
        if title.kind == TitleKind.PARENT:
            raise InvalidEntityStateError(f"Title {title_id} is a debt header")

        apply_to_title(title, result)
        idx = len(self.adjustments)
        self.adjustments.append(result.adjustment)
        self._title_adjustments.setdefault(title_id, []).append(idx)
        return title

    def apply_corrections(self, corrections: list[StatusCorrection]) -> int:
        """Write reconciled statuses back, skipping stale corrections.

        A correction is stale when the stored status changed after it was
        computed. Returns the number of titles updated.
        """
        applied = 0
        for correction in corrections:
            title = self.titles.get(correction.title_id)
            if title is None:
                logger.warning("Status correction for unknown title %s", correction.title_id)
                continue
            if title.status != correction.stored_status:
                logger.warning(
                    "Skipping stale correction for %s: stored %s, expected %s",
                    title.title_id,
                    title.status.value,
                    correction.stored_status.value,
                )
                continue
            title.status = correction.effective_status
            applied += 1
        if applied:
            logger.info("Applied %d status corrections", applied)
        return applied

    # Query methods
    def get_client(self, client_id: str) -> Client:
        client = self.clients.get(client_id)
        if client is None:
            raise EntityNotFoundError(f"Client {client_id} not found")
        return client

    def get_title(self, title_id: str) -> Title:
        title = self.titles.get(title_id)
        if title is None:
            raise EntityNotFoundError(f"Title {title_id} not found")
        return title

    def get_client_titles(self, client_id: str) -> list[Title]:
        """Get all titles for a client."""
        return [self.titles[tid] for tid in self._client_titles.get(client_id, [])]

    def get_installments(self, parent_title_id: str) -> list[Title]:
        """Get the installments generated from a parent title."""
        return [self.titles[tid] for tid in self._children.get(parent_title_id, [])]

    def get_client_agreements(self, client_id: str) -> list[Agreement]:
        """Get all agreements for a client."""
        return [self.agreements[aid] for aid in self._client_agreements.get(client_id, [])]

    def get_title_adjustments(self, title_id: str) -> list[Adjustment]:
        """Get the adjustment history of a title, oldest first."""
        return [self.adjustments[i] for i in self._title_adjustments.get(title_id, [])]

    def titles_by_status(self, *statuses: TitleStatus) -> list[Title]:
        """Get titles whose stored status is one of ``statuses``."""
        wanted = set(statuses)
        return [t for t in self.titles.values() if t.status in wanted]

    def get_client_contacts(self, client_id: str) -> list[Contact]:
        return [c for c in self.contacts if c.client_id == client_id]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "clients": len(self.clients),
            "titles": len(self.titles),
            "installments": sum(
                1 for t in self.titles.values() if t.kind == TitleKind.INSTALLMENT
            ),
            "agreements": len(self.agreements),
            "adjustments": len(self.adjustments),
            "contacts": len(self.contacts),
        }
