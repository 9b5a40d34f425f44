"""Shared serialization utilities for sinks."""

import uuid
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from collection_engine.models import Event

EVENT_SOURCE = "collection-engine"


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return {serialize_value(k): serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output.

    Money stays a string so no cent is lost to float rounding.
    """
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    elif isinstance(value, dict):
        return {serialize_value(k): serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def make_event(
    event_type: str,
    subject: str,
    record: Any,
    event_time: datetime | None = None,
    metadata: dict | None = None,
) -> Event:
    """Wrap a record in the standard event envelope.

    Parameters
    ----------
    event_type : str
        ``entity.action`` name, e.g. ``agreement.created``.
    subject : str
        ID of the affected entity.
    record : Any
        Dataclass or dict carried as the event payload.
    event_time : datetime | None
        Defaults to now.
    metadata : dict | None
        Extra envelope metadata.
    """
    return Event(
        event_id=uuid.uuid4().hex,
        event_type=event_type,
        event_time=event_time or datetime.now(),
        source=EVENT_SOURCE,
        subject=subject,
        data=to_dict(record),
        metadata=metadata or {},
    )
