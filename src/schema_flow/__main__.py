"""
Main entry point for the schema-flow command line
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from schema_flow.core.config import Config
from schema_flow.core.editor import SchemaEditor
from schema_flow.utils.logger import setup_logging
from schema_flow.utils.sql_parser import SQLParseError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser"""
    parser = argparse.ArgumentParser(
        prog="schema-flow",
        description="Design relational schemas and keep them in sync with SQL",
    )
    parser.add_argument("--config", help="YAML configuration file (default: $CONFIG_FILE)")
    parser.add_argument("--storage", help="JSON file holding the schema model")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("show", help="List tables and relationships")
    commands.add_parser("sql", help="Print the generated SQL")

    apply_cmd = commands.add_parser("apply", help="Replace the model with a SQL script")
    apply_cmd.add_argument("file", help="SQL file to apply")

    commands.add_parser("detect", help="Detect relations from column names")
    commands.add_parser("clear", help="Clear all relations")

    export_cmd = commands.add_parser("export", help="Write the generated SQL to a file")
    export_cmd.add_argument("--output", help="Destination .sql file")

    table_cmd = commands.add_parser("add-table", help="Create a table")
    table_cmd.add_argument("name", nargs="?", help="Table name")

    column_cmd = commands.add_parser("add-column", help="Append a column to a table")
    column_cmd.add_argument("table_id")

    connect_cmd = commands.add_parser("connect", help="Link a column to another table's column")
    connect_cmd.add_argument("source_table")
    connect_cmd.add_argument("source_column")
    connect_cmd.add_argument("target_table")
    connect_cmd.add_argument("target_column")

    commands.add_parser("reset", help="Remove all tables")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Resolve configuration from --config or CONFIG_FILE, falling back to defaults"""
    config_file = args.config or os.getenv('CONFIG_FILE')
    config = Config.from_yaml(config_file) if config_file else Config()
    if args.storage:
        config.storage.path = args.storage
    return config


def run(editor: SchemaEditor, args: argparse.Namespace) -> int:
    """Execute a parsed command against an editor session"""
    if args.command == "show":
        names = {table.id: table.name for table in editor.tables}
        for table in editor.tables:
            print(f"{table.id}\t{table.name}")
            for col in table.columns:
                flags = "".join([
                    " PK" if col.is_primary_key else "",
                    " FK" if col.is_foreign_key else "",
                    "" if col.is_nullable else " NOT NULL",
                ])
                print(f"  {col.id}\t{col.name} {col.type}{flags}")
        for edge in editor.edges():
            print(f"{names[edge.source]} -> {names[edge.target]} [{edge.label}]")
    elif args.command == "sql":
        sys.stdout.write(editor.sql())
    elif args.command == "apply":
        try:
            sql = Path(args.file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Cannot read {args.file}: {e}", file=sys.stderr)
            return 1
        try:
            tables = editor.apply_sql(sql)
        except SQLParseError as e:
            print(f"SQL Error: {e}", file=sys.stderr)
            return 1
        print(f"SQL applied successfully: {len(tables)} tables")
    elif args.command == "detect":
        result = editor.detect_relations()
        if result.relations_found:
            print(f"Detected {result.relations_found} potential relationships")
        else:
            print("No potential relationships detected")
    elif args.command == "clear":
        editor.clear_relations()
        print("All relationships cleared")
    elif args.command == "export":
        print(f"SQL written to {editor.export_sql(args.output)}")
    elif args.command == "add-table":
        table = editor.handler.create_table(args.name)
        print(f"Created table: {table.name} ({table.id})")
    elif args.command == "add-column":
        if editor.handler.get_table(args.table_id) is None:
            print(f"Table not found: {args.table_id}", file=sys.stderr)
            return 1
        editor.handler.add_column(args.table_id)
        print("Column added")
    elif args.command == "connect":
        source = editor.handler.get_table(args.source_table)
        target = editor.handler.get_table(args.target_table)
        if (source is None or target is None
                or source.get_column(args.source_column) is None
                or target.get_column(args.target_column) is None):
            print("Column not found", file=sys.stderr)
            return 1
        editor.handler.connect_columns(
            args.source_table, args.source_column, args.target_table, args.target_column
        )
        print("Relationship created")
    elif args.command == "reset":
        editor.handler.remove_all_tables()
        print("All tables removed")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging.model_dump())
    editor = SchemaEditor(config)
    return run(editor, args)


if __name__ == '__main__':
    sys.exit(main())
