"""JSON file sink for exporting portfolios and reports to files."""

import json
import logging
from pathlib import Path
from typing import Any

from collection_engine.exceptions import SinkError
from collection_engine.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


class JsonFileSink:
    """Output data to JSON files, one file per entity type."""

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkError(f"Cannot create output directory {self.output_dir}: {e}") from e
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to ``<entity_type>.json``, replacing it."""
        file_path = self.output_dir / f"{entity_type}.json"

        data = [to_dict(record) for record in records]

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(data, f, ensure_ascii=False)
        except OSError as e:
            raise SinkError(f"Failed to write {file_path}: {e}") from e

        self._counts[entity_type] = len(records)
        logger.debug("Wrote %d %s records to %s", len(records), entity_type, file_path)

    def write_document(self, name: str, document: dict[str, Any]) -> Path:
        """Write a single JSON document such as a portfolio report."""
        file_path = self.output_dir / f"{name}.json"
        try:
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(to_dict(document), f, indent=2 if self.pretty else None, ensure_ascii=False)
        except OSError as e:
            raise SinkError(f"Failed to write {file_path}: {e}") from e
        return file_path

    @property
    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    def close(self) -> None:
        """Print summary."""
        print(f"JSON files written to: {self.output_dir}")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")
