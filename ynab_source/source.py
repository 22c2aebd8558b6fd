"""Source orchestration: fetch → validate → transform → emit.

Runs every API call sequentially and yields named tables as soon as they
are complete:
  user → budgets (+accounts) → per budget: categories, payees, months,
  transactions → accumulated per-budget tables

Emission order is fixed:
  budgets, accounts, categories, categoryGroups, payees, months,
  transactions, subtransactions

Per-budget rows accumulate in budget order, then in response order.
Any transport or validation error aborts the run; nothing is retried.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from ynab_source.api.client import YnabClient
from ynab_source.schemas.base import Collection, Resource
from ynab_source.schemas.registry import (
    BUDGET,
    PER_BUDGET_RESOURCES,
    USER,
    get_resource,
)

logger = logging.getLogger(__name__)

# Cache hints are bucketed to 5-minute windows
CACHE_WINDOW_MS = 5 * 60 * 1000

# (table name, resource name, collection name)
BUDGET_TABLES = [
    ("budgets", "budget", "budgets"),
    ("accounts", "budget", "budgetAccounts"),
]
PER_BUDGET_TABLES = [
    ("categories", "categories", "categories"),
    ("categoryGroups", "categories", "categoryGroups"),
    ("payees", "payees", "payees"),
    ("months", "months", "months"),
    ("transactions", "transactions", "transactions"),
    ("subtransactions", "transactions", "subtransactions"),
]
TABLE_NAMES = [t[0] for t in BUDGET_TABLES + PER_BUDGET_TABLES]


def content_hash(now: float) -> str:
    """Floor the current time (epoch seconds) to a 5-minute bucket, in ms.

    This is a freshness token, not a hash of the data: every run inside
    the same window produces the same value.
    """
    now_ms = int(now * 1000)
    return str(now_ms - now_ms % CACHE_WINDOW_MS)


def table_collection(table_name: str) -> Collection:
    """Return the Collection (manifest) behind an emitted table name."""
    for name, resource_name, collection_name in BUDGET_TABLES + PER_BUDGET_TABLES:
        if name == table_name:
            return get_resource(resource_name).collection(collection_name)
    raise KeyError(f"Unknown table '{table_name}' (known: {', '.join(TABLE_NAMES)})")


@dataclass
class Table:
    """One emitted table: manifest, rows and cache-hint token."""
    name: str
    column_types: list[dict[str, str]]
    rows: list[dict]
    content: str

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "columnTypes": self.column_types,
            "rows": self.rows,
            "content": self.content,
        }


@dataclass
class ConnectionResult:
    """Outcome of a connectivity probe."""
    ok: bool
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.ok


class BudgetSource:
    """Pulls all budget data through a YnabClient and yields tables.

    Args:
        client: A YnabClient (or mock exposing ``get(endpoint)``).
        clock: Returns the current epoch time in seconds; injectable for tests.
    """

    def __init__(self, client: YnabClient, clock: Callable[[], float] | None = None):
        self.client = client
        self.clock = clock or time.time

    def _fetch(self, resource: Resource, budget_id: str | None = None) -> dict[str, list[dict]]:
        payload = self.client.get(resource.path(budget_id))
        collections = resource.parse(payload, budget_id)
        logger.info(
            "Fetched %s%s: %s",
            resource.name,
            f" for budget {budget_id}" if budget_id else "",
            ", ".join(f"{name}={len(rows)}" for name, rows in collections.items()),
        )
        return collections

    def tables(self) -> Iterator[Table]:
        """Yield every table in emission order.

        Raises:
            ApiError: If any request fails.
            ValidationError: If any response does not match its schema.
        """
        user = self._fetch(USER)
        logger.info("Authenticated as user %s", user["users"][0]["userId"])

        content = content_hash(self.clock())

        budget_collections = self._fetch(BUDGET)
        for table_name, _, collection_name in BUDGET_TABLES:
            yield self._table(
                table_name, BUDGET.collection(collection_name),
                budget_collections[collection_name], content,
            )

        accumulated: dict[tuple[str, str], list[dict]] = {
            (resource_name, collection_name): []
            for _, resource_name, collection_name in PER_BUDGET_TABLES
        }
        for budget in budget_collections["budgets"]:
            budget_id = budget["id"]
            logger.info("Pulling budget %s (%s)", budget["name"], budget_id)
            for resource in PER_BUDGET_RESOURCES:
                for collection_name, rows in self._fetch(resource, budget_id).items():
                    accumulated[(resource.name, collection_name)].extend(rows)

        for table_name, resource_name, collection_name in PER_BUDGET_TABLES:
            yield self._table(
                table_name,
                get_resource(resource_name).collection(collection_name),
                accumulated[(resource_name, collection_name)],
                content,
            )

    @staticmethod
    def _table(name: str, collection: Collection, rows: list[dict], content: str) -> Table:
        logger.info("Emitting table %s (%d rows)", name, len(rows))
        return Table(
            name=name,
            column_types=collection.column_types(),
            rows=rows,
            content=content,
        )

    def test_connection(self) -> ConnectionResult:
        """Fetch and validate /user. Never raises; failures carry a reason."""
        try:
            USER.validate(self.client.get(USER.path()))
        except Exception as e:
            logger.warning("Connection test failed: %s", e)
            return ConnectionResult(ok=False, reason=str(e))
        return ConnectionResult(ok=True)
