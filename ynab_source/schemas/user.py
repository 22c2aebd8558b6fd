"""User resource: the token owner. Used as the connectivity probe."""

from __future__ import annotations

from pydantic import StrictStr

from .base import ApiModel, Collection, Resource, columns


class User(ApiModel):
    id: StrictStr


class UserData(ApiModel):
    user: User


class UserResponse(ApiModel):
    data: UserData


USERS = Collection("users", columns(("userId", "string")))


def transform(result: UserResponse) -> dict[str, list[dict]]:
    return {USERS.name: [USERS.project({"userId": result.data.user.id})]}


RESOURCE = Resource(
    name="user",
    endpoint="/user",
    model=UserResponse,
    collections=(USERS,),
    transform=transform,
)
