"""
Relationship models derived from foreign key metadata
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class RelationType(Enum):
    """Cardinality of a foreign key relationship"""
    ONE_TO_ONE = "oneToOne"
    ONE_TO_MANY = "oneToMany"
    MANY_TO_MANY = "manyToMany"

    @property
    def label(self) -> str:
        """Short label drawn on the edge"""
        return _LABELS[self]

    @property
    def color(self) -> str:
        """Edge stroke color"""
        return _COLORS[self]


_LABELS = {
    RelationType.ONE_TO_ONE: "1:1",
    RelationType.ONE_TO_MANY: "1:n",
    RelationType.MANY_TO_MANY: "n:m",
}

_COLORS = {
    RelationType.ONE_TO_ONE: "#10B981",
    RelationType.ONE_TO_MANY: "#3B82F6",
    RelationType.MANY_TO_MANY: "#8B5CF6",
}


@dataclass(frozen=True)
class RelationshipEdge:
    """
    Displayable edge between two tables.

    source/target are table ids; source_handle is the referenced column id and
    target_handle the foreign key column id, regardless of edge direction.
    """
    id: str
    source: str
    target: str
    source_handle: str
    target_handle: str
    relation_type: RelationType

    @property
    def label(self) -> str:
        return self.relation_type.label

    @property
    def color(self) -> str:
        return self.relation_type.color

    def connects(self, source: str, target: str, handle_a: str, handle_b: str) -> bool:
        """Check if this edge joins source->target on the given handles, in either order"""
        if self.source != source or self.target != target:
            return False
        return {self.source_handle, self.target_handle} == {handle_a, handle_b}

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'source': self.source,
            'target': self.target,
            'sourceHandle': self.source_handle,
            'targetHandle': self.target_handle,
            'relationType': self.relation_type.value,
            'label': self.label,
            'color': self.color,
        }


@dataclass(frozen=True)
class InferredRelation:
    """A foreign key link proposed by naming inference"""
    source_table: str
    source_column: str
    target_table: str
    target_column: str
    reasons: List[str] = field(default_factory=list, compare=False, hash=False)
