"""
Data models for schema representation
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

DEFAULT_COLUMN_TYPE = "VARCHAR(255)"


@dataclass(frozen=True)
class Column:
    """Column definition in a table"""
    id: str
    name: str
    type: str = DEFAULT_COLUMN_TYPE
    is_primary_key: bool = False
    is_foreign_key: bool = False
    references_table: str = ""
    references_column: str = ""
    is_nullable: bool = True

    @property
    def has_reference(self) -> bool:
        """True when the column is flagged as FK and both reference fields are set"""
        return bool(self.is_foreign_key and self.references_table and self.references_column)

    def without_reference(self) -> "Column":
        """Copy of the column with all foreign key fields reset"""
        return replace(self, is_foreign_key=False, references_table="", references_column="")

    def referencing(self, table_id: str, column_id: str) -> "Column":
        """Copy of the column marked as a foreign key to table_id.column_id"""
        return replace(
            self,
            is_foreign_key=True,
            references_table=table_id,
            references_column=column_id,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'isPrimaryKey': self.is_primary_key,
            'isForeignKey': self.is_foreign_key,
            'referencesTable': self.references_table,
            'referencesColumn': self.references_column,
            'isNullable': self.is_nullable,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        """Build a column from its persisted dictionary form"""
        nullable = data.get('isNullable')
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            type=str(data.get('type') or DEFAULT_COLUMN_TYPE),
            is_primary_key=bool(data.get('isPrimaryKey', False)),
            is_foreign_key=bool(data.get('isForeignKey', False)),
            references_table=str(data.get('referencesTable') or ''),
            references_column=str(data.get('referencesColumn') or ''),
            is_nullable=True if nullable is None else bool(nullable),
        )


@dataclass(frozen=True)
class Table:
    """Table schema definition"""
    id: str
    name: str
    columns: Tuple[Column, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any iterable of columns, store as tuple
        object.__setattr__(self, 'columns', tuple(self.columns))

    def get_column(self, column_id: str) -> Optional[Column]:
        """Get column by id"""
        for col in self.columns:
            if col.id == column_id:
                return col
        return None

    def get_column_by_name(self, name: str) -> Optional[Column]:
        """Get column by name"""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    @property
    def primary_keys(self) -> Tuple[Column, ...]:
        return tuple(col for col in self.columns if col.is_primary_key)

    def with_column(self, column: Column) -> "Table":
        """Copy of the table with the column of the same id replaced, or appended if new"""
        if self.get_column(column.id) is None:
            return replace(self, columns=self.columns + (column,))
        return replace(
            self,
            columns=tuple(column if col.id == column.id else col for col in self.columns),
        )

    def without_column(self, column_id: str) -> "Table":
        """Copy of the table without the given column"""
        return replace(self, columns=tuple(col for col in self.columns if col.id != column_id))

    def to_dict(self) -> dict:
        """Convert to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'columns': [col.to_dict() for col in self.columns],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        """Build a table from its persisted dictionary form"""
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            columns=[Column.from_dict(col) for col in data.get('columns') or []],
        )
