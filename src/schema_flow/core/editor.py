"""
Schema editing session: model ownership, persistence and SQL sync
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from schema_flow.core.config import Config
from schema_flow.core.persistence import SchemaFileStore
from schema_flow.handlers.relation_inference import InferenceResult, RelationInferenceEngine
from schema_flow.handlers.schema_handler import SchemaHandler
from schema_flow.models.relationship import RelationshipEdge
from schema_flow.models.schema import Table
from schema_flow.utils.sql_parser import SQLParseError

logger = logging.getLogger(__name__)


class SchemaEditor:
    """
    One editing session over a persisted schema.

    All commands go through a single SchemaHandler; every change is written
    back to storage before the command returns.
    """

    def __init__(self, config: Config, store: Optional[SchemaFileStore] = None):
        self.config = config
        self.store = store or SchemaFileStore(config.storage.path)

        self.handler = SchemaHandler(
            self.store.load(),
            default_column_type=config.editor.default_column_type,
            table_name_prefix=config.editor.table_name_prefix,
            inference_engine=RelationInferenceEngine(config.inference.irregular_plurals),
        )
        self.handler.subscribe(self.store.save)

        self.stats: Dict[str, int] = {
            'changes': 0,
            'sql_applied': 0,
            'sql_errors': 0,
            'relations_detected': 0,
        }
        self.handler.subscribe(self._count_change)

    @property
    def tables(self) -> List[Table]:
        return self.handler.tables

    def edges(self) -> List[RelationshipEdge]:
        return self.handler.edges()

    def sql(self) -> str:
        return self.handler.generate_sql()

    def detect_relations(self) -> InferenceResult:
        """Clear all relations, then infer them from column names"""
        result = self.handler.detect_relations(clear=True)
        self.stats['relations_detected'] += result.relations_found
        return result

    def clear_relations(self) -> List[Table]:
        return self.handler.clear_relations()

    def apply_sql(self, sql: str) -> List[Table]:
        """
        Replace the model with the tables defined in a SQL script

        Raises:
            SQLParseError: If the script is rejected; nothing is changed
        """
        try:
            tables = self.handler.apply_sql(sql)
        except SQLParseError as e:
            self.stats['sql_errors'] += 1
            logger.warning(f"SQL Error: {e}")
            raise
        self.stats['sql_applied'] += 1
        return tables

    def export_sql(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the generated SQL to a .sql file, byte for byte"""
        target = Path(path or self.config.storage.export_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline="") as f:
            f.write(self.sql())
        logger.info(f"SQL exported to {target}")
        return target

    def get_statistics(self) -> Dict[str, int]:
        """Get session statistics"""
        return self.stats.copy()

    def _count_change(self, tables: List[Table]) -> None:
        self.stats['changes'] += 1
