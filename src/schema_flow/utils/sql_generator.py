"""
SQL generation from the in-memory schema model
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from schema_flow.models.schema import Column, Table

logger = logging.getLogger(__name__)


class SQLGenerator:
    """Renders tables as CREATE TABLE statements"""

    INDENT = "  "

    def generate(self, tables: Sequence[Table]) -> str:
        """
        Generate SQL for all tables, in model order

        Args:
            tables: Tables of the current model

        Returns:
            SQL script, one CREATE TABLE statement per table
        """
        index = {table.id: table for table in tables}
        return "".join(self._create_table(table, index) for table in tables)

    def _create_table(self, table: Table, index: Dict[str, Table]) -> str:
        lines = [self._column_definition(col) for col in table.columns]

        for col in table.columns:
            target = self._resolve_reference(col, index)
            if target is None:
                if col.is_foreign_key:
                    logger.debug(
                        f"Skipping unresolved foreign key {table.name}.{col.name}"
                    )
                continue
            ref_table, ref_column = target
            lines.append(
                f"{self.INDENT}FOREIGN KEY ({col.name}) "
                f"REFERENCES {ref_table.name} ({ref_column.name})"
            )

        body = ",\n".join(lines)
        return f"CREATE TABLE {table.name} (\n{body}\n);\n\n"

    def _column_definition(self, column: Column) -> str:
        definition = f"{self.INDENT}{column.name} {column.type}"
        if column.is_primary_key:
            definition += " PRIMARY KEY"
        if not column.is_nullable:
            definition += " NOT NULL"
        return definition

    @staticmethod
    def _resolve_reference(column: Column,
                           index: Dict[str, Table]) -> Optional[Tuple[Table, Column]]:
        if not column.has_reference:
            return None
        ref_table = index.get(column.references_table)
        if ref_table is None:
            return None
        ref_column = ref_table.get_column(column.references_column)
        if ref_column is None:
            return None
        return ref_table, ref_column


def generate_sql(tables: List[Table]) -> str:
    """Generate the SQL script for a list of tables"""
    return SQLGenerator().generate(tables)
