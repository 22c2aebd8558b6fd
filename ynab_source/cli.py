"""CLI entry point for ynab-source.

Commands:
    ynab-source check                       Test the access token against /user
    ynab-source pull [--db PATH] [--force]  Pull all tables into SQLite
                     [--sheets]             ...and push them to Google Sheets
    ynab-source schema [TABLE]              Print column manifests

Environment:
    YNAB_ACCESS_TOKEN   Personal access token (overrides connection.yaml)
    YNAB_BASE_URL       API root (default https://api.ynab.com/v1)
    YNAB_CONFIG_DIR     Directory holding connection.yaml (default "config")
    YNAB_DB_PATH        SQLite database path (default "ynab.db")
    YNAB_SPREADSHEET_ID / YNAB_CREDENTIALS   Google Sheets target + service account
    YNAB_LOG_LEVEL      Logging level (default INFO)
"""

from __future__ import annotations

import argparse
import logging
import os
import sqlite3
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    """Configure logging based on YNAB_LOG_LEVEL env var."""
    level = os.environ.get("YNAB_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _get_config():
    """Load connection config; the config directory is optional."""
    from ynab_source.config import Config

    config_dir = Path(os.environ.get("YNAB_CONFIG_DIR", "config"))
    return Config(config_dir=config_dir if config_dir.is_dir() else None)


def _get_client(config):
    from ynab_source.api.client import YnabClient

    return YnabClient(config.access_token, base_url=config.base_url)


def _get_sink(db_path: Path | None):
    from ynab_source.sinks.sqlite import SqliteSink

    return SqliteSink(db_path=str(db_path or os.environ.get("YNAB_DB_PATH", "ynab.db")))


def _get_spreadsheet():
    """Open the Google Sheets spreadsheet if configured.

    Returns a gspread.Spreadsheet instance, or None if not configured.
    """
    spreadsheet_id = os.environ.get("YNAB_SPREADSHEET_ID")
    credentials_path = os.environ.get("YNAB_CREDENTIALS")

    if not spreadsheet_id or not credentials_path:
        return None

    try:
        import gspread
        from google.oauth2.service_account import Credentials

        scopes = [
            "https://www.googleapis.com/auth/spreadsheets",
            "https://www.googleapis.com/auth/drive",
        ]
        creds = Credentials.from_service_account_file(credentials_path, scopes=scopes)
        gc = gspread.authorize(creds)
        return gc.open_by_key(spreadsheet_id)
    except Exception as e:
        logger.warning("Sheets not available: %s", e)
        return None


def _get_sheets():
    """Create a SheetsSink if credentials and spreadsheet ID are configured."""
    spreadsheet = _get_spreadsheet()
    if spreadsheet is None:
        return None

    from ynab_source.sinks.sheets import SheetsSink

    return SheetsSink(spreadsheet)


# ── Command handlers ─────────────────────────────────────


def cmd_check(args: argparse.Namespace) -> int:
    """Probe the API with the configured token."""
    from ynab_source.source import BudgetSource

    try:
        client = _get_client(_get_config())
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    try:
        result = BudgetSource(client).test_connection()
    finally:
        client.close()

    if result.ok:
        print("Connection OK")
        return 0
    print(f"Connection failed: {result.reason}")
    return 1


def cmd_pull(args: argparse.Namespace) -> int:
    """Pull every table and write it to SQLite (and optionally Sheets)."""
    from ynab_source.api.client import ApiError
    from ynab_source.schemas.base import ValidationError
    from ynab_source.source import BudgetSource

    try:
        client = _get_client(_get_config())
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    sheets = None
    if args.sheets:
        sheets = _get_sheets()
        if sheets is None:
            print("Error: Sheets not configured (set YNAB_SPREADSHEET_ID and YNAB_CREDENTIALS)")
            client.close()
            return 1

    sink = _get_sink(args.db)
    sheet_errors = 0
    try:
        for table in BudgetSource(client).tables():
            written = sink.write(table, force=args.force)
            suffix = "" if written else " (unchanged)"
            print(f"  {table.name}: {len(table.rows)} rows{suffix}")
            if sheets is not None:
                result = sheets.push(table)
                if result.error:
                    sheet_errors += 1
    except (ApiError, ValidationError, sqlite3.Error) as e:
        logger.error("Pull failed: %s", e)
        print(f"Error: {e}")
        return 1
    finally:
        sink.close()
        client.close()

    if sheet_errors:
        print(f"\n{sheet_errors} table(s) failed to push to Sheets")
        return 1
    return 0


def cmd_schema(args: argparse.Namespace) -> int:
    """Print the column manifest of one table, or of all tables."""
    from ynab_source.source import TABLE_NAMES, table_collection

    names = [args.table] if args.table else TABLE_NAMES
    for name in names:
        try:
            collection = table_collection(name)
        except KeyError as e:
            print(f"Error: {e.args[0]}")
            return 1
        print(f"{name}:")
        for col in collection.columns:
            print(f"  {col.name:<28} {col.evidence_type}")
        for nested in collection.nested:
            print(f"  {nested:<28} (nested, not in manifest)")
    return 0


_COMMANDS = {
    "check": cmd_check,
    "pull": cmd_pull,
    "schema": cmd_schema,
}


def main(argv: list[str] | None = None):
    _setup_logging()

    parser = argparse.ArgumentParser(
        prog="ynab-source",
        description="YNAB budget data source connector",
    )
    subparsers = parser.add_subparsers(dest="command")

    # check
    subparsers.add_parser("check", help="Test the access token against the API")

    # pull
    pull_p = subparsers.add_parser("pull", help="Pull all tables into SQLite")
    pull_p.add_argument("--db", type=Path, help="SQLite database path")
    pull_p.add_argument("--force", action="store_true",
                        help="Rewrite tables even if the cache token is unchanged")
    pull_p.add_argument("--sheets", action="store_true",
                        help="Also push every table to Google Sheets")

    # schema
    schema_p = subparsers.add_parser("schema", help="Print table column manifests")
    schema_p.add_argument("table", nargs="?", help="Table name")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    handler = _COMMANDS.get(args.command)
    if handler is None:
        print(f"Unknown command: {args.command}")
        sys.exit(1)

    sys.exit(handler(args))


if __name__ == "__main__":
    main()
