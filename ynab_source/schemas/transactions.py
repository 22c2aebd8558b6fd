"""Transactions resource: transactions with nested split subtransactions.

Transaction ids are plain strings rather than UUIDs: scheduled-transaction
instances use ids like ``<uuid>_2024-01-15``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import StrictBool, StrictInt, StrictStr

from .base import (
    ApiModel,
    Collection,
    IsoDate,
    Milliunit,
    Resource,
    Uuid,
    columns,
)


class SubTransaction(ApiModel):
    id: StrictStr
    transaction_id: StrictStr
    amount: Milliunit
    memo: Optional[StrictStr] = None
    payee_id: Optional[Uuid] = None
    payee_name: Optional[StrictStr] = None
    category_id: Optional[Uuid] = None
    category_name: Optional[StrictStr] = None
    transfer_account_id: Optional[Uuid] = None
    transfer_transaction_id: Optional[StrictStr] = None
    deleted: StrictBool


class Transaction(ApiModel):
    id: StrictStr
    date: IsoDate
    amount: Milliunit
    memo: Optional[StrictStr] = None
    cleared: StrictStr  # cleared, uncleared, reconciled
    approved: StrictBool
    flag_color: Optional[StrictStr] = None
    account_id: Uuid
    account_name: StrictStr
    payee_id: Optional[Uuid] = None
    payee_name: Optional[StrictStr] = None
    category_id: Optional[Uuid] = None
    category_name: Optional[StrictStr] = None
    transfer_account_id: Optional[Uuid] = None
    transfer_transaction_id: Optional[StrictStr] = None
    matched_transaction_id: Optional[StrictStr] = None
    import_id: Optional[StrictStr] = None
    import_payee_name: Optional[StrictStr] = None
    import_payee_name_original: Optional[StrictStr] = None
    debt_transaction_type: Optional[StrictStr] = None
    deleted: StrictBool
    subtransactions: list[SubTransaction]


class TransactionData(ApiModel):
    transactions: list[Transaction]
    server_knowledge: StrictInt


class TransactionResponse(ApiModel):
    data: TransactionData


TRANSACTIONS = Collection("transactions", columns(
    ("id", "string"),
    ("budgetId", "string"),
    ("date", "date"),
    ("amount", "number"),
    ("memo", "string"),
    ("cleared", "string"),
    ("approved", "boolean"),
    ("flag_color", "string"),
    ("account_id", "string"),
    ("account_name", "string"),
    ("payee_id", "string"),
    ("payee_name", "string"),
    ("category_id", "string"),
    ("category_name", "string"),
    ("transfer_account_id", "string"),
    ("transfer_transaction_id", "string"),
    ("matched_transaction_id", "string"),
    ("import_id", "string"),
    ("import_payee_name", "string"),
    ("import_payee_name_original", "string"),
    ("debt_transaction_type", "string"),
    ("deleted", "boolean"),
))

SUBTRANSACTIONS = Collection("subtransactions", columns(
    ("id", "string"),
    ("budgetId", "string"),
    ("transaction_id", "string"),
    ("amount", "number"),
    ("memo", "string"),
    ("payee_id", "string"),
    ("payee_name", "string"),
    ("category_id", "string"),
    ("category_name", "string"),
    ("transfer_account_id", "string"),
    ("transfer_transaction_id", "string"),
    ("deleted", "boolean"),
))


def transform(result: TransactionResponse, budget_id: str) -> dict[str, list[dict]]:
    transactions: list[dict] = []
    subtransactions: list[dict] = []
    for txn in result.data.transactions:
        transactions.append(TRANSACTIONS.project(
            {**txn.model_dump(exclude={"subtransactions"}), "budgetId": budget_id}
        ))
        for sub in txn.subtransactions:
            subtransactions.append(SUBTRANSACTIONS.project(
                {**sub.model_dump(), "budgetId": budget_id}
            ))
    return {TRANSACTIONS.name: transactions, SUBTRANSACTIONS.name: subtransactions}


RESOURCE = Resource(
    name="transactions",
    endpoint="/budgets/{budget_id}/transactions",
    model=TransactionResponse,
    collections=(TRANSACTIONS, SUBTRANSACTIONS),
    transform=transform,
    per_budget=True,
)
