"""
Foreign key inference from column naming conventions

A column whose name looks like a foreign key ('customer_id', 'authorId',
'id', ...) is linked to every primary key column of each other table whose
name matches the column's stem, allowing for singular/plural forms.

    engine = RelationInferenceEngine()
    result = engine.detect_relations(engine.clear_relations(tables))
    result.relations_found, result.tables

The engine is stateless; results are deterministic for the same input.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from schema_flow.models.relationship import InferredRelation
from schema_flow.models.schema import Table
from schema_flow.utils.naming import (
    candidate_table_name,
    is_bare_id,
    is_potential_foreign_key,
    table_names_match,
)

logger = logging.getLogger(__name__)


@dataclass
class InferenceResult:
    """Outcome of a detection run"""
    tables: List[Table]
    relations: List[InferredRelation] = field(default_factory=list)

    @property
    def relations_found(self) -> int:
        return len(self.relations)


class RelationInferenceEngine:
    """Proposes foreign key links between tables from column names"""

    def __init__(self, irregular_plurals: Optional[Mapping[str, str]] = None):
        self.irregular_plurals = irregular_plurals

    def clear_relations(self, tables: Sequence[Table]) -> List[Table]:
        """Reset every column's foreign key fields"""
        return [
            Table(id=table.id, name=table.name,
                  columns=[col.without_reference() for col in table.columns])
            for table in tables
        ]

    def detect_relations(self, tables: Sequence[Table]) -> InferenceResult:
        """
        Link naming-convention columns to matching tables' primary keys

        Every match is applied in iteration order, so when a column matches
        several targets the last one wins. The count reports every match.

        Args:
            tables: Current model; not modified

        Returns:
            InferenceResult with the updated tables and the proposed relations
        """
        working: Dict[str, Table] = {table.id: table for table in tables}
        relations: List[InferredRelation] = []

        for source in tables:
            for column in source.columns:
                if not is_potential_foreign_key(column.name):
                    continue

                candidate = candidate_table_name(column.name)
                match_all = is_bare_id(column.name)

                for target in tables:
                    if target.id == source.id:
                        continue
                    reasons = self._match_reasons(target.name, candidate, match_all)
                    if not reasons:
                        continue

                    for pk in target.primary_keys:
                        updated = working[source.id].with_column(
                            column.referencing(target.id, pk.id)
                        )
                        working[source.id] = updated
                        relations.append(InferredRelation(
                            source_table=source.id,
                            source_column=column.id,
                            target_table=target.id,
                            target_column=pk.id,
                            reasons=reasons,
                        ))
                        logger.debug(
                            f"Inferred {source.name}.{column.name} -> "
                            f"{target.name}.{pk.name} ({', '.join(reasons)})"
                        )

        logger.info(f"Relation inference found {len(relations)} candidate links")
        return InferenceResult(tables=list(working.values()), relations=relations)

    def _match_reasons(self, table_name: str, candidate: str, match_all: bool) -> List[str]:
        reasons = []
        if table_names_match(table_name, candidate, self.irregular_plurals):
            reasons.append(f"name '{candidate}' matches table '{table_name}'")
        if match_all:
            reasons.append("bare 'id' column matches any table")
        return reasons
