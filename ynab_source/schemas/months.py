"""Months resource: one summary row per budget month."""

from __future__ import annotations

from typing import Optional

from pydantic import StrictBool, StrictInt, StrictStr

from .base import ApiModel, Collection, IsoDate, Milliunit, Resource, columns


class MonthSummary(ApiModel):
    month: IsoDate
    note: Optional[StrictStr] = None
    income: Milliunit
    budgeted: Milliunit
    activity: Milliunit
    to_be_budgeted: Milliunit
    age_of_money: Optional[StrictInt] = None  # days
    deleted: StrictBool


class MonthData(ApiModel):
    months: list[MonthSummary]
    server_knowledge: StrictInt


class MonthResponse(ApiModel):
    data: MonthData


MONTHS = Collection("months", columns(
    ("month", "date"),
    ("budgetId", "string"),
    ("note", "string"),
    ("income", "number"),
    ("budgeted", "number"),
    ("activity", "number"),
    ("to_be_budgeted", "number"),
    ("age_of_money", "number"),
    ("deleted", "boolean"),
))


def transform(result: MonthResponse, budget_id: str) -> dict[str, list[dict]]:
    return {
        MONTHS.name: [
            MONTHS.project({**month.model_dump(), "budgetId": budget_id})
            for month in result.data.months
        ],
    }


RESOURCE = Resource(
    name="months",
    endpoint="/budgets/{budget_id}/months",
    model=MonthResponse,
    collections=(MONTHS,),
    transform=transform,
    per_budget=True,
)
