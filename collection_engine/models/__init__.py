"""Data models for the collection domain."""

from collection_engine.models.base import Client, Contact, Event

__all__ = ["Client", "Contact", "Event"]
