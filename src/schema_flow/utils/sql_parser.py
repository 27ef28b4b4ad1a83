"""
Parser for the CREATE TABLE dialect produced by the SQL generator
"""
import logging
import re
from enum import Enum
from typing import Callable, List, Optional

from schema_flow.models.schema import DEFAULT_COLUMN_TYPE, Column, Table
from schema_flow.utils.ids import IdGenerator

logger = logging.getLogger(__name__)

CREATE_TABLE_PATTERN = re.compile(
    r"CREATE\s+TABLE\s+([^\s(]+)\s*\(\s*([^;]+?)\s*\)\s*;",
    re.IGNORECASE | re.DOTALL,
)

QUOTE_CHARS = "\"'`"


class ParseErrorReason(Enum):
    """Why a SQL script was rejected"""
    MISSING_CREATE_TABLE = "missing_create_table"
    UNBALANCED_PARENTHESES = "unbalanced_parentheses"
    MISSING_SEMICOLON = "missing_semicolon"
    NO_STATEMENTS = "no_statements"
    EMPTY_COLUMN_NAME = "empty_column_name"


class SQLParseError(ValueError):
    """Raised when SQL text cannot be turned into tables"""

    def __init__(self, reason: ParseErrorReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class SQLParser:
    """
    Parses CREATE TABLE statements into tables.

    Foreign key clauses are skipped: columns come back with empty references.
    Parsing is all-or-nothing, any failure raises SQLParseError before a
    single table is returned.
    """

    def __init__(self, table_id_factory: Optional[Callable[[], str]] = None,
                 column_id_factory: Optional[Callable[[], str]] = None):
        self.new_table_id = table_id_factory or IdGenerator("table")
        self.new_column_id = column_id_factory or IdGenerator("column")

    def parse(self, sql: str) -> List[Table]:
        """
        Parse a SQL script

        Args:
            sql: SQL text containing one or more CREATE TABLE statements

        Returns:
            Parsed tables, in statement order

        Raises:
            SQLParseError: If the script fails validation
        """
        self._validate(sql)

        statements = list(CREATE_TABLE_PATTERN.finditer(sql))
        if not statements:
            raise SQLParseError(
                ParseErrorReason.NO_STATEMENTS,
                "No valid CREATE TABLE statements found",
            )

        tables = [self._parse_statement(match.group(1), match.group(2))
                  for match in statements]
        logger.debug(f"Parsed {len(tables)} tables from SQL")
        return tables

    @staticmethod
    def _validate(sql: str) -> None:
        # A missing ')' falls through to the balance check below
        if "CREATE TABLE" not in sql or "(" not in sql:
            raise SQLParseError(
                ParseErrorReason.MISSING_CREATE_TABLE,
                "Invalid SQL - missing CREATE TABLE statement or parentheses",
            )

        if sql.count("(") != sql.count(")"):
            raise SQLParseError(
                ParseErrorReason.UNBALANCED_PARENTHESES,
                "Unclosed parentheses in SQL",
            )

        statements = [s for s in sql.split(";") if s.strip()]
        if statements and not sql.strip().endswith(";"):
            raise SQLParseError(
                ParseErrorReason.MISSING_SEMICOLON,
                "Missing semicolon at end of SQL statement",
            )

    def _parse_statement(self, raw_name: str, body: str) -> Table:
        table_name = raw_name.strip(QUOTE_CHARS)
        table_id = self.new_table_id()

        columns = []
        for line in split_top_level(body):
            if line.upper().startswith("FOREIGN KEY"):
                continue
            columns.append(self._parse_column(line))

        return Table(id=table_id, name=table_name, columns=columns)

    def _parse_column(self, line: str) -> Column:
        parts = line.split()
        name = parts[0].strip(QUOTE_CHARS).strip()
        if not name:
            raise SQLParseError(
                ParseErrorReason.EMPTY_COLUMN_NAME,
                f"Invalid column name in line: {line}",
            )

        col_type = parts[1] if len(parts) > 1 else DEFAULT_COLUMN_TYPE
        upper = line.upper()
        return Column(
            id=self.new_column_id(),
            name=name,
            type=col_type.upper(),
            is_primary_key="PRIMARY KEY" in upper,
            is_nullable="NOT NULL" not in upper,
        )


def split_top_level(body: str) -> List[str]:
    """Split a column block on commas that are not nested inside parentheses"""
    parts = []
    depth = 0
    current = []
    for char in body:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def parse_sql(sql: str) -> List[Table]:
    """Parse a SQL script with freshly generated ids"""
    return SQLParser().parse(sql)
