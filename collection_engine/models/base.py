"""Base models shared across the collection domain."""

from dataclasses import dataclass, field
from datetime import datetime

from collection_engine.models.collection.enums import ContactChannel


@dataclass
class Client:
    """Debtor (cliente).

    ``tax_id`` holds a CPF for individuals or a CNPJ for companies, in
    display format.
    """

    client_id: str
    name: str
    tax_id: str
    phone: str | None = None
    email: str | None = None
    city: str | None = None
    state: str | None = None
    created_at: datetime | None = None


@dataclass
class Contact:
    """Telecollection touch point (comunicacao or completed agendamento)."""

    client_id: str
    occurred_at: datetime
    channel: ContactChannel = ContactChannel.PHONE
    notes: str = ""


@dataclass
class Event:
    """Standard envelope for records handed to the external store."""

    event_id: str
    event_type: str  # entity.action (e.g., agreement.created)
    event_time: datetime
    source: str
    subject: str  # Entity ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
