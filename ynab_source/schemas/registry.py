"""Resource registry: resource name → Resource record.

PER_BUDGET_RESOURCES is ordered; the orchestrator fetches them in this
order for every budget.
"""

from __future__ import annotations

from . import budgets, categories, months, payees, transactions, user
from .base import Resource

USER = user.RESOURCE
BUDGET = budgets.RESOURCE

PER_BUDGET_RESOURCES: tuple[Resource, ...] = (
    categories.RESOURCE,
    payees.RESOURCE,
    months.RESOURCE,
    transactions.RESOURCE,
)

RESOURCES: dict[str, Resource] = {
    r.name: r for r in (USER, BUDGET, *PER_BUDGET_RESOURCES)
}


def get_resource(name: str) -> Resource:
    try:
        return RESOURCES[name]
    except KeyError:
        raise KeyError(
            f"Unknown resource '{name}' (known: {', '.join(RESOURCES)})"
        ) from None
