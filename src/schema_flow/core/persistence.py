"""
JSON file persistence for the table collection
"""
import json
import logging
from pathlib import Path
from typing import List, Union

from schema_flow.models.schema import Table

logger = logging.getLogger(__name__)


class SchemaFileStore:
    """Stores the model as ``{"tables": [...]}`` in a JSON file"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> List[Table]:
        """
        Load tables from disk

        A missing or unreadable file yields an empty model; malformed
        table entries are skipped.

        Returns:
            List of tables in stored order
        """
        if not self.path.exists():
            logger.debug(f"No saved schema at {self.path}, starting empty")
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to parse saved schema {self.path}: {e}")
            return []

        raw_tables = data.get("tables") if isinstance(data, dict) else None
        if not isinstance(raw_tables, list):
            logger.warning(f"Saved schema {self.path} has no table list, starting empty")
            return []

        tables = []
        for entry in raw_tables:
            try:
                tables.append(Table.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed table entry in {self.path}: {e}")
        logger.info(f"Loaded {len(tables)} tables from {self.path}")
        return tables

    def save(self, tables: List[Table]) -> None:
        """Write tables to disk"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"tables": [table.to_dict() for table in tables]}
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        logger.debug(f"Saved {len(tables)} tables to {self.path}")
