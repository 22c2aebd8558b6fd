"""Shared building blocks for resource schemas.

Each API resource is described by a Resource record that bundles:
  - a pydantic model validating the raw JSON response,
  - one Collection (ordered column manifest) per emitted row set,
  - a pure transform turning the validated model into flat rows.

Value coercions happen during validation so transforms only reshape:
  - milliunit amounts are divided by 1000
  - ISO date / datetime strings become date / datetime objects
  - absent, null or empty optional dates become None
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Annotated, Any, Callable, Optional

import pydantic
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Strict

MILLIUNITS_PER_UNIT = 1000

_UUID_RE = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


class ValidationError(Exception):
    """Raised when an API response does not match its resource schema.

    Only the first mismatch is reported, as ``<path>: <reason>``.
    """

    def __init__(self, resource: str, path: str, reason: str, error_count: int = 1):
        self.resource = resource
        self.path = path
        self.reason = reason
        self.error_count = error_count
        super().__init__(f"Invalid {resource} response at {path}: {reason}")

    @classmethod
    def from_pydantic(cls, resource: str, exc: pydantic.ValidationError) -> ValidationError:
        errors = exc.errors()
        first = errors[0]
        return cls(resource, format_loc(first["loc"]), first["msg"], len(errors))


def format_loc(loc: tuple) -> str:
    """Render a pydantic error location as a dotted path.

    ("data", "budgets", 0, "id") → "data.budgets[0].id"
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "<root>"


# ── Value coercions ──────────────────────────────────────


def from_milliunits(value: float) -> float:
    return value / MILLIUNITS_PER_UNIT


def _check_uuid(value: str) -> str:
    if not _UUID_RE.fullmatch(value):
        raise ValueError(f"invalid UUID: {value!r}")
    return value


def _parse_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError("expected an ISO 8601 date string")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"invalid date: {value!r}") from None


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError("expected an ISO 8601 datetime string")
    if "T" not in value:
        raise ValueError(f"invalid datetime: {value!r}")
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValueError(f"invalid datetime: {value!r}") from None


# Numbers accept int or float but never bool or numeric strings.
Number = Annotated[float, Strict()]
Milliunit = Annotated[float, Strict(), AfterValidator(from_milliunits)]
Uuid = Annotated[str, Strict(), AfterValidator(_check_uuid)]
IsoDate = Annotated[date, BeforeValidator(_parse_date)]
OptionalIsoDate = Annotated[Optional[date], BeforeValidator(_parse_date)]
OptionalIsoDateTime = Annotated[Optional[datetime], BeforeValidator(_parse_datetime)]

# Per-period values keyed by month, e.g. {"2024-01": 4250} → {"2024-01": 4.25}
PeriodicValues = dict[str, Milliunit]


class ApiModel(BaseModel):
    """Base for response models. Unknown keys are dropped."""
    model_config = ConfigDict(extra="ignore", frozen=True)


# ── Column manifests ─────────────────────────────────────


@dataclass(frozen=True)
class Column:
    name: str
    evidence_type: str  # string, number, boolean, date
    type_fidelity: str = "precise"

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "evidenceType": self.evidence_type,
            "typeFidelity": self.type_fidelity,
        }


def columns(*pairs: tuple[str, str]) -> tuple[Column, ...]:
    """Build a manifest from (name, evidence_type) pairs."""
    return tuple(Column(name, evidence_type) for name, evidence_type in pairs)


@dataclass(frozen=True)
class Collection:
    """A named row set and its column manifest.

    ``nested`` lists fields that stay in each row as nested values but are
    not part of the manifest (e.g. per-period debt figures on accounts).
    """
    name: str
    columns: tuple[Column, ...]
    nested: tuple[str, ...] = ()

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column_types(self) -> list[dict[str, str]]:
        return [c.to_dict() for c in self.columns]

    def project(self, data: dict) -> dict:
        """Build a row holding exactly the manifest columns plus nested fields."""
        row = {c.name: data[c.name] for c in self.columns}
        for name in self.nested:
            row[name] = data[name]
        return row


# ── Resource record ──────────────────────────────────────


@dataclass(frozen=True)
class Resource:
    """Declarative description of one API resource.

    Per-budget resources have ``{budget_id}`` in their endpoint and their
    transform takes the owning budget id as a second argument.
    """
    name: str
    endpoint: str
    model: type[BaseModel]
    collections: tuple[Collection, ...]
    transform: Callable[..., dict[str, list[dict]]]
    per_budget: bool = False

    def path(self, budget_id: str | None = None) -> str:
        if not self.per_budget:
            return self.endpoint
        if budget_id is None:
            raise ValueError(f"Resource '{self.name}' requires a budget id")
        return self.endpoint.format(budget_id=budget_id)

    def collection(self, name: str) -> Collection:
        for coll in self.collections:
            if coll.name == name:
                return coll
        raise KeyError(f"Resource '{self.name}' has no collection '{name}'")

    def validate(self, payload: Any) -> BaseModel:
        """Validate a decoded JSON payload.

        Raises:
            ValidationError: On the first structural mismatch.
        """
        try:
            return self.model.model_validate(payload)
        except pydantic.ValidationError as e:
            raise ValidationError.from_pydantic(self.name, e) from e

    def parse(self, payload: Any, budget_id: str | None = None) -> dict[str, list[dict]]:
        """Validate then transform a payload into named row collections."""
        result = self.validate(payload)
        if self.per_budget:
            if budget_id is None:
                raise ValueError(f"Resource '{self.name}' requires a budget id")
            return self.transform(result, budget_id)
        return self.transform(result)
