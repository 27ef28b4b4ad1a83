"""
Relationship classification and edge derivation
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from schema_flow.models.relationship import RelationshipEdge, RelationType
from schema_flow.models.schema import Column, Table

logger = logging.getLogger(__name__)

ONE_TO_ONE_NAME_HINTS = ("one", "single")


@dataclass(frozen=True)
class Classification:
    """Cardinality and display direction of one foreign key"""
    relation_type: RelationType
    source: str
    target: str


class RelationshipClassifier:
    """Derives relationship cardinality and displayable edges from column metadata"""

    def classify(self, column: Column, owning_table: Table,
                 tables: Sequence[Table]) -> Optional[Classification]:
        """
        Classify the relationship created by a foreign key column

        Args:
            column: Foreign key column
            owning_table: Table that holds the column
            tables: All tables of the model

        Returns:
            Classification, or None if the column is not a resolvable foreign key
        """
        index = {table.id: table for table in tables}
        if not self._resolves(column, index):
            return None

        source, target = column.references_table, owning_table.id
        relation_type = RelationType.ONE_TO_MANY
        shared_key = False

        if column.is_primary_key:
            relation_type = RelationType.ONE_TO_ONE
            shared_key = True

        lowered = column.name.lower()
        if any(hint in lowered for hint in ONE_TO_ONE_NAME_HINTS):
            relation_type = RelationType.ONE_TO_ONE
            source, target = owning_table.id, column.references_table

        # Junction table heuristic; a shared primary key stays one-to-one
        fk_count = sum(1 for col in owning_table.columns if self._resolves(col, index))
        if fk_count >= 2 and not shared_key:
            relation_type = RelationType.MANY_TO_MANY

        return Classification(relation_type=relation_type, source=source, target=target)

    def derive_edges(self, tables: Sequence[Table]) -> List[RelationshipEdge]:
        """
        Build the edge list for the whole model

        Dangling references (deleted table or column) produce no edge.
        """
        edges: List[RelationshipEdge] = []

        for table in tables:
            for column in table.columns:
                classification = self.classify(column, table, tables)
                if classification is None:
                    continue

                exists = any(
                    edge.connects(classification.source, classification.target,
                                  column.references_column, column.id)
                    for edge in edges
                )
                if exists:
                    continue

                edges.append(RelationshipEdge(
                    id=f"{column.id}-{column.references_column}",
                    source=classification.source,
                    target=classification.target,
                    source_handle=column.references_column,
                    target_handle=column.id,
                    relation_type=classification.relation_type,
                ))

        logger.debug(f"Derived {len(edges)} relationship edges")
        return edges

    @staticmethod
    def _resolves(column: Column, index: Dict[str, Table]) -> bool:
        if not column.has_reference:
            return False
        ref_table = index.get(column.references_table)
        return ref_table is not None and ref_table.get_column(column.references_column) is not None


def derive_edges(tables: Sequence[Table]) -> List[RelationshipEdge]:
    """Derive displayable relationship edges from a list of tables"""
    return RelationshipClassifier().derive_edges(tables)
