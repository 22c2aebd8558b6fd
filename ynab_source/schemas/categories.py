"""Categories resource: category groups with their nested categories."""

from __future__ import annotations

from typing import Optional

from pydantic import StrictBool, StrictInt, StrictStr

from .base import (
    ApiModel,
    Collection,
    Milliunit,
    OptionalIsoDate,
    Resource,
    Uuid,
    columns,
)


class Category(ApiModel):
    id: Uuid
    category_group_id: Uuid
    category_group_name: StrictStr
    name: StrictStr
    hidden: StrictBool
    note: Optional[StrictStr] = None
    budgeted: Milliunit
    activity: Milliunit
    balance: Milliunit
    goal_type: Optional[StrictStr] = None
    goal_target: Optional[Milliunit] = None
    goal_target_month: OptionalIsoDate = None
    # Whole percent (0-100), not a currency amount
    goal_percentage_complete: Optional[StrictInt] = None
    deleted: StrictBool


class CategoryGroup(ApiModel):
    id: Uuid
    name: StrictStr
    hidden: StrictBool
    deleted: StrictBool
    categories: list[Category]


class CategoryData(ApiModel):
    category_groups: list[CategoryGroup]
    server_knowledge: StrictInt


class CategoryResponse(ApiModel):
    data: CategoryData


CATEGORIES = Collection("categories", columns(
    ("id", "string"),
    ("budgetId", "string"),
    ("category_group_id", "string"),
    ("category_group_name", "string"),
    ("name", "string"),
    ("hidden", "boolean"),
    ("note", "string"),
    ("budgeted", "number"),
    ("activity", "number"),
    ("balance", "number"),
    ("goal_type", "string"),
    ("goal_target", "number"),
    ("goal_target_month", "date"),
    ("goal_percentage_complete", "number"),
    ("deleted", "boolean"),
))

CATEGORY_GROUPS = Collection("categoryGroups", columns(
    ("id", "string"),
    ("budgetId", "string"),
    ("name", "string"),
    ("hidden", "boolean"),
    ("deleted", "boolean"),
))


def transform(result: CategoryResponse, budget_id: str) -> dict[str, list[dict]]:
    """Split groups from their categories, flattening categories across groups."""
    categories: list[dict] = []
    groups: list[dict] = []
    for group in result.data.category_groups:
        groups.append(CATEGORY_GROUPS.project(
            {**group.model_dump(exclude={"categories"}), "budgetId": budget_id}
        ))
        for category in group.categories:
            categories.append(CATEGORIES.project(
                {**category.model_dump(), "budgetId": budget_id}
            ))
    return {CATEGORIES.name: categories, CATEGORY_GROUPS.name: groups}


RESOURCE = Resource(
    name="categories",
    endpoint="/budgets/{budget_id}/categories",
    model=CategoryResponse,
    collections=(CATEGORIES, CATEGORY_GROUPS),
    transform=transform,
    per_budget=True,
)
