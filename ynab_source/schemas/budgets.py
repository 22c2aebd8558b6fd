"""Budget resource: budgets with their accounts included.

One call (``/budgets?include_accounts=true``) returns every budget with a
nested ``accounts`` array. The transform splits it into two row sets:
  - budgets: one row per budget, without the accounts array
  - budgetAccounts: every account of every budget, stamped with budgetId

Loan accounts carry per-period debt figures (interest rates, minimum
payments, escrow amounts) as ``{"YYYY-MM": milliunits}`` maps. They are
converted to units but kept as nested values and left out of the manifest.
"""

from __future__ import annotations

from typing import Optional

from pydantic import StrictBool, StrictStr

from .base import (
    ApiModel,
    Collection,
    Milliunit,
    OptionalIsoDate,
    OptionalIsoDateTime,
    PeriodicValues,
    Resource,
    Uuid,
    columns,
)


class Account(ApiModel):
    id: Uuid
    name: StrictStr
    type: StrictStr
    on_budget: StrictBool
    closed: StrictBool
    note: Optional[StrictStr] = None
    balance: Milliunit
    cleared_balance: Milliunit
    uncleared_balance: Milliunit
    transfer_payee_id: StrictStr
    direct_import_linked: Optional[StrictBool] = None
    direct_import_in_error: Optional[StrictBool] = None
    last_reconciled_at: OptionalIsoDateTime = None
    debt_original_balance: Optional[Milliunit] = None
    debt_interest_rates: Optional[PeriodicValues] = None
    debt_minimum_payments: Optional[PeriodicValues] = None
    debt_escrow_amounts: Optional[PeriodicValues] = None
    deleted: StrictBool


class Budget(ApiModel):
    id: Uuid
    name: StrictStr
    last_modified_on: OptionalIsoDateTime = None
    first_month: OptionalIsoDate = None
    last_month: OptionalIsoDate = None
    accounts: list[Account]


class BudgetData(ApiModel):
    budgets: list[Budget]


class BudgetResponse(ApiModel):
    data: BudgetData


BUDGETS = Collection("budgets", columns(
    ("id", "string"),
    ("name", "string"),
    ("last_modified_on", "date"),
    ("first_month", "date"),
    ("last_month", "date"),
))

BUDGET_ACCOUNTS = Collection(
    "budgetAccounts",
    columns(
        ("id", "string"),
        ("budgetId", "string"),
        ("name", "string"),
        ("type", "string"),
        ("on_budget", "boolean"),
        ("closed", "boolean"),
        ("note", "string"),
        ("balance", "number"),
        ("cleared_balance", "number"),
        ("uncleared_balance", "number"),
        ("transfer_payee_id", "string"),
        ("direct_import_linked", "boolean"),
        ("direct_import_in_error", "boolean"),
        ("last_reconciled_at", "date"),
        ("debt_original_balance", "number"),
        ("deleted", "boolean"),
    ),
    nested=("debt_interest_rates", "debt_minimum_payments", "debt_escrow_amounts"),
)


def transform(result: BudgetResponse) -> dict[str, list[dict]]:
    budgets: list[dict] = []
    accounts: list[dict] = []
    for budget in result.data.budgets:
        budgets.append(BUDGETS.project(budget.model_dump(exclude={"accounts"})))
        for account in budget.accounts:
            accounts.append(BUDGET_ACCOUNTS.project(
                {**account.model_dump(), "budgetId": budget.id}
            ))
    return {BUDGETS.name: budgets, BUDGET_ACCOUNTS.name: accounts}


RESOURCE = Resource(
    name="budget",
    endpoint="/budgets?include_accounts=true",
    model=BudgetResponse,
    collections=(BUDGETS, BUDGET_ACCOUNTS),
    transform=transform,
)
