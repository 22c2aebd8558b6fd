"""Payees resource."""

from __future__ import annotations

from typing import Optional

from pydantic import StrictBool, StrictInt, StrictStr

from .base import ApiModel, Collection, Resource, Uuid, columns


class Payee(ApiModel):
    id: Uuid
    name: StrictStr
    # Set only for transfer payees
    transfer_account_id: Optional[Uuid] = None
    deleted: StrictBool


class PayeeData(ApiModel):
    payees: list[Payee]
    server_knowledge: StrictInt


class PayeeResponse(ApiModel):
    data: PayeeData


PAYEES = Collection("payees", columns(
    ("id", "string"),
    ("budgetId", "string"),
    ("name", "string"),
    ("transfer_account_id", "string"),
    ("deleted", "boolean"),
))


def transform(result: PayeeResponse, budget_id: str) -> dict[str, list[dict]]:
    return {
        PAYEES.name: [
            PAYEES.project({**payee.model_dump(), "budgetId": budget_id})
            for payee in result.data.payees
        ],
    }


RESOURCE = Resource(
    name="payees",
    endpoint="/budgets/{budget_id}/payees",
    model=PayeeResponse,
    collections=(PAYEES,),
    transform=transform,
    per_budget=True,
)
