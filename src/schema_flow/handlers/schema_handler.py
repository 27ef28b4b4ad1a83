"""
Schema model ownership and mutation handling
"""
import logging
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional

from schema_flow.handlers.relation_inference import InferenceResult, RelationInferenceEngine
from schema_flow.handlers.relationship_classifier import RelationshipClassifier
from schema_flow.models.relationship import RelationshipEdge
from schema_flow.models.schema import DEFAULT_COLUMN_TYPE, Column, Table
from schema_flow.utils.ids import IdGenerator
from schema_flow.utils.sql_generator import SQLGenerator
from schema_flow.utils.sql_parser import SQLParser

logger = logging.getLogger(__name__)

ChangeListener = Callable[[List[Table]], None]


class SchemaHandler:
    """
    Owns the table collection of an editing session.

    Every mutation replaces whole tables by id and returns the new snapshot.
    Mutations addressing an unknown id are silent no-ops. Listeners are called
    with the new snapshot after every mutation that changed the model.
    """

    def __init__(self, tables: Optional[Iterable[Table]] = None,
                 default_column_type: str = DEFAULT_COLUMN_TYPE,
                 table_name_prefix: str = "Table",
                 inference_engine: Optional[RelationInferenceEngine] = None):
        self.default_column_type = default_column_type
        self.table_name_prefix = table_name_prefix
        self.inference = inference_engine or RelationInferenceEngine()
        self.classifier = RelationshipClassifier()
        self.generator = SQLGenerator()
        self.new_table_id = IdGenerator("table")
        self.new_column_id = IdGenerator("column")
        self._tables: Dict[str, Table] = {}
        self._listeners: List[ChangeListener] = []
        self._load(tables or [])

    # Snapshot access

    @property
    def tables(self) -> List[Table]:
        """Current snapshot, in model order"""
        return list(self._tables.values())

    def get_table(self, table_id: str) -> Optional[Table]:
        return self._tables.get(table_id)

    def subscribe(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the snapshot after each change"""
        self._listeners.append(listener)

    # Table mutations

    def create_table(self, name: Optional[str] = None) -> Table:
        """
        Create an empty table with a fresh id

        Args:
            name: Table name, defaults to 'Table N' with N = table count + 1

        Returns:
            The new table
        """
        table = Table(
            id=self.new_table_id(),
            name=name or f"{self.table_name_prefix} {len(self._tables) + 1}",
        )
        self._tables[table.id] = table
        logger.info(f"Created table {table.name} ({table.id})")
        self._commit()
        return table

    def delete_table(self, table_id: str) -> List[Table]:
        """Remove a table; references to it become dangling"""
        table = self._tables.pop(table_id, None)
        if table is None:
            logger.debug(f"delete_table: no table {table_id}")
            return self.tables
        logger.info(f"Deleted table {table.name} ({table_id})")
        return self._commit()

    def update_table(self, table: Table) -> List[Table]:
        """
        Replace the table with the same id

        The update is rejected when a column id is repeated, is owned by
        another table, or belonged to a deleted column.
        """
        if table.id not in self._tables:
            logger.debug(f"update_table: no table {table.id}")
            return self.tables

        conflicts = self._column_id_conflicts(self._tables[table.id], table)
        if conflicts:
            logger.warning(
                f"update_table: rejected {table.name} ({table.id}), "
                f"column ids already used: {', '.join(conflicts)}"
            )
            return self.tables

        self._reserve_columns(table.columns)
        self._tables[table.id] = table
        return self._commit()

    def remove_all_tables(self) -> List[Table]:
        """Empty the model"""
        self._tables.clear()
        logger.info("Removed all tables")
        return self._commit()

    def replace_tables(self, tables: Iterable[Table]) -> List[Table]:
        """Replace the whole table collection"""
        self._tables.clear()
        self._load(tables)
        logger.info(f"Replaced model with {len(self._tables)} tables")
        return self._commit()

    # Column mutations

    def add_column(self, table_id: str) -> List[Table]:
        """
        Append a default column to a table

        The first column of an empty table becomes its primary key.
        """
        table = self._tables.get(table_id)
        if table is None:
            logger.debug(f"add_column: no table {table_id}")
            return self.tables

        column = Column(
            id=self.new_column_id(),
            name=f"column_{len(table.columns) + 1}",
            type=self.default_column_type,
            is_primary_key=not table.columns,
        )
        self._tables[table_id] = table.with_column(column)
        logger.info(f"Added column {column.name} to table {table.name}")
        return self._commit()

    def update_column(self, table_id: str, column: Column) -> List[Table]:
        """Replace the column with the same id inside a table"""
        table = self._tables.get(table_id)
        if table is None or table.get_column(column.id) is None:
            logger.debug(f"update_column: no column {table_id}/{column.id}")
            return self.tables
        self._tables[table_id] = table.with_column(column)
        return self._commit()

    def delete_column(self, table_id: str, column_id: str) -> List[Table]:
        """Remove a column; edges through it disappear with it"""
        table = self._tables.get(table_id)
        if table is None or table.get_column(column_id) is None:
            logger.debug(f"delete_column: no column {table_id}/{column_id}")
            return self.tables
        self._tables[table_id] = table.without_column(column_id)
        logger.info(f"Deleted column {column_id} from table {table.name}")
        return self._commit()

    def toggle_foreign_key(self, table_id: str, column_id: str) -> List[Table]:
        """Flip the FK flag; switching it off also drops the reference"""
        table = self._tables.get(table_id)
        column = table.get_column(column_id) if table else None
        if column is None:
            return self.tables
        if column.is_foreign_key:
            updated = column.without_reference()
        else:
            updated = replace(column, is_foreign_key=True)
        return self.update_column(table_id, updated)

    def connect_columns(self, source_table_id: str, source_column_id: str,
                        target_table_id: str, target_column_id: str) -> List[Table]:
        """Make the source column a foreign key to the target column"""
        source = self._tables.get(source_table_id)
        target = self._tables.get(target_table_id)
        if source is None or target is None:
            return self.tables

        source_column = source.get_column(source_column_id)
        target_column = target.get_column(target_column_id)
        if source_column is None or target_column is None:
            return self.tables

        logger.info(
            f"Created relationship from {source.name}.{source_column.name} "
            f"to {target.name}.{target_column.name}"
        )
        return self.update_column(
            source_table_id, source_column.referencing(target.id, target_column.id)
        )

    # Relations

    def clear_relations(self) -> List[Table]:
        """Reset all foreign key fields across the model"""
        self._tables = {t.id: t for t in self.inference.clear_relations(self.tables)}
        logger.info("All relationships cleared")
        return self._commit()

    def detect_relations(self, clear: bool = True) -> InferenceResult:
        """
        Run naming inference over the model

        Args:
            clear: Clear existing relations first

        Returns:
            InferenceResult; zero relations found is a normal outcome
        """
        tables = self.inference.clear_relations(self.tables) if clear else self.tables
        result = self.inference.detect_relations(tables)
        self._tables = {t.id: t for t in result.tables}
        self._commit()

        if result.relations_found:
            logger.info(f"Detected {result.relations_found} potential relationships")
        else:
            logger.info("No potential relationships detected")
        return result

    def edges(self) -> List[RelationshipEdge]:
        """Displayable edges derived from the current model"""
        return self.classifier.derive_edges(self.tables)

    # SQL

    def generate_sql(self) -> str:
        return self.generator.generate(self.tables)

    def apply_sql(self, sql: str) -> List[Table]:
        """
        Replace the model with the tables parsed from SQL

        Raises:
            SQLParseError: If parsing fails; the model is left unchanged
        """
        parser = SQLParser(self.new_table_id, self.new_column_id)
        tables = parser.parse(sql)
        self._tables = {t.id: t for t in tables}
        logger.info(f"SQL applied successfully ({len(tables)} tables)")
        return self._commit()

    # Internals

    def _load(self, tables: Iterable[Table]) -> None:
        for table in tables:
            if table.id in self._tables:
                logger.warning(f"Ignoring duplicate table id {table.id} ({table.name})")
                continue
            self._tables[table.id] = table
            self.new_table_id.reserve([table.id])
            self._reserve_columns(table.columns)

    def _column_id_conflicts(self, current: Table, updated: Table) -> List[str]:
        owned = {col.id for col in current.columns}
        seen = set()
        conflicts = []
        for col in updated.columns:
            if col.id in seen or (col.id not in owned and self.new_column_id.was_issued(col.id)):
                conflicts.append(col.id)
            seen.add(col.id)
        return conflicts

    def _reserve_columns(self, columns: Iterable[Column]) -> None:
        self.new_column_id.reserve(col.id for col in columns)

    def _commit(self) -> List[Table]:
        snapshot = self.tables
        for listener in self._listeners:
            listener(snapshot)
        return snapshot
