"""Google Sheets sink: one worksheet per emitted table.

Each push clears (or creates) the worksheet named after the table, writes
the manifest header, then appends rows in batches.

The gspread spreadsheet is passed to the constructor; tests use a mock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime

import gspread

from ynab_source.source import Table

logger = logging.getLogger(__name__)

BATCH_SIZE = 100


def _cell(value: object) -> object:
    """Convert a value for Sheets: None → empty string, dates → ISO."""
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def table_to_values(table: Table) -> list[list]:
    """Header row followed by one row per record, in manifest order."""
    header = [c["name"] for c in table.column_types]
    return [header] + [[_cell(row[name]) for name in header] for row in table.rows]


@dataclass
class PushResult:
    """Result of pushing one table."""
    sheet: str
    rows_pushed: int
    api_calls: int
    error: str | None = None


class SheetsSink:
    """Writes tables to a gspread Spreadsheet.

    Args:
        spreadsheet: A gspread.Spreadsheet instance (or mock).
    """

    def __init__(self, spreadsheet: object):
        self.spreadsheet = spreadsheet

    def _reset_worksheet(self, name: str, rows: int, cols: int):
        try:
            ws = self.spreadsheet.worksheet(name)
        except gspread.WorksheetNotFound:
            logger.info("Creating worksheet %s", name)
            return self.spreadsheet.add_worksheet(title=name, rows=rows, cols=cols)
        ws.clear()
        return ws

    def push(self, table: Table) -> PushResult:
        """Replace the worksheet contents with the table.

        Failures are logged and reported on the result, not raised.
        """
        values = table_to_values(table)
        api_calls = 0
        try:
            ws = self._reset_worksheet(table.name, len(values), len(values[0]))
            api_calls += 1
            for i in range(0, len(values), BATCH_SIZE):
                ws.append_rows(values[i : i + BATCH_SIZE], value_input_option="RAW")
                api_calls += 1
        except Exception as e:
            logger.error("Failed to push table '%s': %s", table.name, e)
            return PushResult(
                sheet=table.name, rows_pushed=0, api_calls=api_calls, error=str(e),
            )

        logger.info("Pushed %d rows to sheet %s", len(table.rows), table.name)
        return PushResult(sheet=table.name, rows_pushed=len(table.rows), api_calls=api_calls)

