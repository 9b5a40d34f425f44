"""Output sinks for exporting portfolios and reports."""

from collection_engine.sinks.console import ConsoleSink
from collection_engine.sinks.json_file import JsonFileSink
from collection_engine.sinks.serialization import make_event, serialize_value, to_dict

__all__ = ["ConsoleSink", "JsonFileSink", "make_event", "serialize_value", "to_dict"]
