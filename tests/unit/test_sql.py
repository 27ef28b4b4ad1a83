"""
Unit tests for SQL generation and parsing
"""
import pytest

from schema_flow.models.schema import Table, Column
from schema_flow.utils.sql_generator import SQLGenerator, generate_sql
from schema_flow.utils.sql_parser import (
    ParseErrorReason,
    SQLParseError,
    SQLParser,
    parse_sql,
    split_top_level,
)

USERS_POSTS_SQL = (
    "CREATE TABLE Users (\n"
    "  id INT PRIMARY KEY\n"
    ");\n"
    "\n"
    "CREATE TABLE Posts (\n"
    "  id INT PRIMARY KEY,\n"
    "  user_id INT,\n"
    "  FOREIGN KEY (user_id) REFERENCES Users (id)\n"
    ");\n"
    "\n"
)


def shape(tables):
    """Table/column content without ids"""
    return [
        (t.name, [(c.name, c.type, c.is_primary_key, c.is_nullable) for c in t.columns])
        for t in tables
    ]


class TestSQLGenerator:
    """Test CREATE TABLE generation"""

    def test_users_posts_scenario(self, sample_tables):
        """Test the exact output for a model with one foreign key"""
        assert generate_sql(sample_tables) == USERS_POSTS_SQL

    def test_not_null_and_primary_key(self):
        """Test column modifiers are appended in order"""
        table = Table(id="t", name="Items", columns=[
            Column(id="c1", name="id", type="INT", is_primary_key=True, is_nullable=False),
            Column(id="c2", name="label", type="TEXT", is_nullable=False)
        ])

        assert generate_sql([table]) == (
            "CREATE TABLE Items (\n"
            "  id INT PRIMARY KEY NOT NULL,\n"
            "  label TEXT NOT NULL\n"
            ");\n\n"
        )

    def test_unresolved_foreign_key_is_skipped(self, posts_table):
        """Test a reference to a deleted table emits no constraint"""
        sql = generate_sql([posts_table])

        assert "FOREIGN KEY" not in sql
        assert sql == (
            "CREATE TABLE Posts (\n"
            "  id INT PRIMARY KEY,\n"
            "  user_id INT\n"
            ");\n\n"
        )

    def test_identifiers_are_not_quoted(self):
        """Test names are emitted verbatim"""
        table = Table(id="t", name="Table 1", columns=[Column(id="c", name="column_1")])

        assert generate_sql([table]).startswith("CREATE TABLE Table 1 (\n  column_1 VARCHAR(255)")

    def test_empty_model(self):
        """Test no tables gives an empty script"""
        assert generate_sql([]) == ""

    def test_generation_is_deterministic(self, sample_tables):
        """Test repeated generation gives identical text"""
        generator = SQLGenerator()

        assert generator.generate(sample_tables) == generator.generate(sample_tables)


class TestSQLParserValidation:
    """Test validation order and failure reasons"""

    @pytest.mark.parametrize("sql,reason", [
        ("SELECT 1;", ParseErrorReason.MISSING_CREATE_TABLE),
        ("CREATE TABLE Foo;", ParseErrorReason.MISSING_CREATE_TABLE),
        ("CREATE TABLE Foo (id INT PRIMARY KEY", ParseErrorReason.UNBALANCED_PARENTHESES),
        ("CREATE TABLE Foo ((id INT);", ParseErrorReason.UNBALANCED_PARENTHESES),
        ("CREATE TABLE Foo (id INT)", ParseErrorReason.MISSING_SEMICOLON),
        ("CREATE TABLE Foo (id INT);\nCREATE TABLE Bar (id INT)",
         ParseErrorReason.MISSING_SEMICOLON),
        ("CREATE TABLE (id INT);", ParseErrorReason.NO_STATEMENTS),
        ('CREATE TABLE Foo ("" INT);', ParseErrorReason.EMPTY_COLUMN_NAME),
    ])
    def test_rejected_scripts(self, sql, reason):
        """Test each malformed script fails with its reason"""
        with pytest.raises(SQLParseError) as exc_info:
            parse_sql(sql)

        assert exc_info.value.reason == reason
        assert str(exc_info.value)

    def test_parse_error_is_value_error(self):
        """Test callers can catch parse failures as ValueError"""
        with pytest.raises(ValueError):
            parse_sql("nonsense")

    def test_unbalanced_checked_before_semicolon(self):
        """Test the balance check runs before the terminator check"""
        with pytest.raises(SQLParseError) as exc_info:
            parse_sql("CREATE TABLE Foo (id INT PRIMARY KEY")

        assert exc_info.value.reason != ParseErrorReason.MISSING_SEMICOLON


class TestSQLParser:
    """Test parsing of valid scripts"""

    def test_parse_columns(self):
        """Test names, types and flags are read from each line"""
        tables = parse_sql(
            "CREATE TABLE \"Accounts\" (\n"
            "  id int primary key not null,\n"
            "  'email' varchar(100) NOT NULL,\n"
            "  nickname\n"
            ");"
        )

        assert shape(tables) == [("Accounts", [
            ("id", "INT", True, False),
            ("email", "VARCHAR(100)", False, False),
            ("nickname", "VARCHAR(255)", False, True),
        ])]

    def test_foreign_key_lines_are_dropped(self):
        """Test FK clauses are not turned into columns or references"""
        tables = parse_sql(USERS_POSTS_SQL)

        posts = tables[1]
        assert [c.name for c in posts.columns] == ["id", "user_id"]
        assert not any(c.is_foreign_key or c.references_table for c in posts.columns)

    def test_commas_inside_types(self):
        """Test a comma nested in parentheses does not split a column"""
        tables = parse_sql("CREATE TABLE Prices (amount DECIMAL(10,2) NOT NULL, id INT);")

        assert shape(tables)[0][1] == [
            ("amount", "DECIMAL(10,2)", False, False),
            ("id", "INT", False, True),
        ]

    def test_fresh_ids(self):
        """Test parsed tables and columns get unique ids"""
        tables = SQLParser().parse(USERS_POSTS_SQL)

        table_ids = [t.id for t in tables]
        column_ids = [c.id for t in tables for c in t.columns]
        assert len(set(table_ids)) == 2
        assert len(set(column_ids)) == 3

    def test_id_factories(self):
        """Test ids come from the supplied factories"""
        parser = SQLParser(lambda: "T", lambda: "C")

        table = parser.parse("CREATE TABLE A (x INT);")[0]

        assert table.id == "T"
        assert table.columns[0].id == "C"

    def test_split_top_level(self):
        assert split_top_level("a INT, b DECIMAL(1,2) ,, c") == ["a INT", "b DECIMAL(1,2)", "c"]


class TestRoundTrip:
    """Test generate -> parse round trips"""

    def test_round_trip_without_foreign_keys(self, unlinked_tables):
        """Test names, types and flags survive a round trip"""
        tables = parse_sql(generate_sql(unlinked_tables))

        assert shape(tables) == shape(unlinked_tables)

    def test_round_trip_drops_foreign_keys(self, sample_tables):
        """Test foreign key metadata is lost on purpose"""
        tables = parse_sql(generate_sql(sample_tables))

        assert shape(tables) == shape(sample_tables)
        assert not any(c.is_foreign_key for t in tables for c in t.columns)
        assert generate_sql(tables) != generate_sql(sample_tables)
