"""Synthetic YNAB API payloads and a fake client for tests.

Builders return fresh dicts shaped like real API responses (amounts in
milliunits, dates as ISO strings). Keyword overrides replace fields.
"""

from __future__ import annotations

import copy


def uid(n: int) -> str:
    """Deterministic, well-formed UUID string."""
    return f"{n:08x}-0000-4000-8000-{n:012x}"


BUDGET_ID = uid(1)
OTHER_BUDGET_ID = uid(2)
USER_ID = uid(99)


def user_response(user_id: str = USER_ID) -> dict:
    return {"data": {"user": {"id": user_id}}}


# ── Budgets & accounts ───────────────────────────────────


def account(id: str, **kw) -> dict:
    data = {
        "id": id,
        "name": "Checking",
        "type": "checking",
        "on_budget": True,
        "closed": False,
        "note": None,
        "balance": 1500,
        "cleared_balance": 1000,
        "uncleared_balance": 500,
        "transfer_payee_id": uid(900),
        "direct_import_linked": False,
        "direct_import_in_error": False,
        "last_reconciled_at": "2024-03-01T12:30:00Z",
        "debt_original_balance": None,
        "debt_interest_rates": {},
        "debt_minimum_payments": {},
        "debt_escrow_amounts": {},
        "deleted": False,
    }
    data.update(kw)
    return data


def budget(id: str = BUDGET_ID, accounts: list[dict] | None = None, **kw) -> dict:
    data = {
        "id": id,
        "name": "Household",
        "last_modified_on": "2024-03-15T08:00:00.000Z",
        "first_month": "2023-01-01",
        "last_month": "2024-04-01",
        "date_format": {"format": "YYYY-MM-DD"},
        "accounts": accounts if accounts is not None else [],
    }
    data.update(kw)
    return data


def budgets_response(*budgets: dict) -> dict:
    return {"data": {"budgets": list(budgets), "default_budget": None}}


# ── Categories ───────────────────────────────────────────


def category(id: str, group_id: str, **kw) -> dict:
    data = {
        "id": id,
        "category_group_id": group_id,
        "category_group_name": "Bills",
        "name": "Rent",
        "hidden": False,
        "note": None,
        "budgeted": 120000,
        "activity": -118500,
        "balance": 1500,
        "goal_type": None,
        "goal_target": None,
        "goal_target_month": None,
        "goal_percentage_complete": None,
        "deleted": False,
    }
    data.update(kw)
    return data


def category_group(id: str, categories: list[dict] | None = None, **kw) -> dict:
    data = {
        "id": id,
        "name": "Bills",
        "hidden": False,
        "deleted": False,
        "categories": categories if categories is not None else [],
    }
    data.update(kw)
    return data


def categories_response(*groups: dict) -> dict:
    return {"data": {"category_groups": list(groups), "server_knowledge": 42}}


# ── Payees ───────────────────────────────────────────────


def payee(id: str, **kw) -> dict:
    data = {"id": id, "name": "Landlord", "transfer_account_id": None, "deleted": False}
    data.update(kw)
    return data


def payees_response(*payees: dict) -> dict:
    return {"data": {"payees": list(payees), "server_knowledge": 42}}


# ── Months ───────────────────────────────────────────────


def month(month: str = "2024-03-01", **kw) -> dict:
    data = {
        "month": month,
        "note": None,
        "income": 500000,
        "budgeted": 450000,
        "activity": -300000,
        "to_be_budgeted": 50000,
        "age_of_money": 32,
        "deleted": False,
    }
    data.update(kw)
    return data


def months_response(*months: dict) -> dict:
    return {"data": {"months": list(months), "server_knowledge": 42}}


# ── Transactions ─────────────────────────────────────────


def subtransaction(id: str, transaction_id: str, **kw) -> dict:
    data = {
        "id": id,
        "transaction_id": transaction_id,
        "amount": -2500,
        "memo": None,
        "payee_id": None,
        "payee_name": None,
        "category_id": None,
        "category_name": None,
        "transfer_account_id": None,
        "transfer_transaction_id": None,
        "deleted": False,
    }
    data.update(kw)
    return data


def transaction(id: str, account_id: str, subtransactions: list[dict] | None = None, **kw) -> dict:
    data = {
        "id": id,
        "date": "2024-03-05",
        "amount": -2500,
        "memo": None,
        "cleared": "cleared",
        "approved": True,
        "flag_color": None,
        "account_id": account_id,
        "account_name": "Checking",
        "payee_id": None,
        "payee_name": None,
        "category_id": None,
        "category_name": None,
        "transfer_account_id": None,
        "transfer_transaction_id": None,
        "matched_transaction_id": None,
        "import_id": None,
        "import_payee_name": None,
        "import_payee_name_original": None,
        "debt_transaction_type": None,
        "deleted": False,
        "subtransactions": subtransactions if subtransactions is not None else [],
    }
    data.update(kw)
    return data


def transactions_response(*transactions: dict) -> dict:
    return {"data": {"transactions": list(transactions), "server_knowledge": 42}}


# ── Full scenario ────────────────────────────────────────


def budget_responses(budget_id: str, seed: int) -> dict[str, dict]:
    """Per-budget responses: 1 group of 2 categories, 3 payees, 1 month,
    2 transactions (the second split into 1 subtransaction).

    ``seed`` keeps ids unique across budgets.
    """
    base = seed * 100
    group_id = uid(base + 10)
    account_id = uid(base + 1)
    txn_id = uid(base + 40)
    return {
        f"/budgets/{budget_id}/categories": categories_response(
            category_group(group_id, [
                category(uid(base + 11), group_id, name="Rent"),
                category(uid(base + 12), group_id, name="Power"),
            ]),
        ),
        f"/budgets/{budget_id}/payees": payees_response(
            payee(uid(base + 21), name="Landlord"),
            payee(uid(base + 22), name="Power Co"),
            payee(uid(base + 23), name="Transfer : Savings",
                  transfer_account_id=uid(base + 2)),
        ),
        f"/budgets/{budget_id}/months": months_response(month("2024-03-01")),
        f"/budgets/{budget_id}/transactions": transactions_response(
            transaction(uid(base + 31), account_id),
            transaction(txn_id, account_id, amount=-4000, subtransactions=[
                subtransaction(uid(base + 41), txn_id, amount=-4000),
            ]),
        ),
    }


def scenario_responses(budget_ids: tuple[str, ...] = (BUDGET_ID,)) -> dict[str, dict]:
    """Endpoint → payload map for a full run over the given budgets.

    Each budget has 2 accounts plus the per-budget data of budget_responses().
    """
    budgets = []
    responses: dict[str, dict] = {"/user": user_response()}
    for seed, budget_id in enumerate(budget_ids, start=1):
        base = seed * 100
        budgets.append(budget(budget_id, name=f"Budget {seed}", accounts=[
            account(uid(base + 1), name="Checking"),
            account(uid(base + 2), name="Savings", type="savings", balance=250000),
        ]))
        responses.update(budget_responses(budget_id, seed))
    responses["/budgets?include_accounts=true"] = budgets_response(*budgets)
    return responses


class FakeClient:
    """Stands in for YnabClient: serves canned payloads by endpoint path.

    A response value that is an exception instance is raised instead.
    """

    def __init__(self, responses: dict[str, object]):
        self.responses = responses
        self.calls: list[str] = []
        self.closed = False

    def get(self, endpoint: str):
        self.calls.append(endpoint)
        value = self.responses[endpoint]
        if isinstance(value, Exception):
            raise value
        return copy.deepcopy(value)

    def close(self):
        self.closed = True
