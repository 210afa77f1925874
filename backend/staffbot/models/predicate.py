"""Closed predicate algebra understood by every record store.

A predicate is a tree of :class:`FieldCondition` leaves joined by
:class:`AllOf` / :class:`AnyOf`. Comparisons are always case-insensitive.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel

from staffbot.models.employee import Employee

FieldName = Literal["first_name", "last_name", "email", "position", "department"]
MatchMode = Literal["equals", "contains"]


class FieldCondition(BaseModel):
    model_config = {"frozen": True}

    field: FieldName
    mode: MatchMode
    value: str


class AllOf(BaseModel):
    model_config = {"frozen": True}

    conditions: tuple[Predicate, ...]


class AnyOf(BaseModel):
    model_config = {"frozen": True}

    conditions: tuple[Predicate, ...]


Predicate = Union[FieldCondition, AllOf, AnyOf]

AllOf.model_rebuild()
AnyOf.model_rebuild()


def equals(field: FieldName, value: str) -> FieldCondition:
    return FieldCondition(field=field, mode="equals", value=value)


def contains(field: FieldName, value: str) -> FieldCondition:
    return FieldCondition(field=field, mode="contains", value=value)


def all_of(*conditions: Predicate) -> AllOf:
    return AllOf(conditions=conditions)


def any_of(*conditions: Predicate) -> AnyOf:
    return AnyOf(conditions=conditions)


def matches(predicate: Predicate, employee: Employee) -> bool:
    """Evaluate ``predicate`` against one record. A missing field never matches."""
    if isinstance(predicate, AllOf):
        return all(matches(p, employee) for p in predicate.conditions)
    if isinstance(predicate, AnyOf):
        return any(matches(p, employee) for p in predicate.conditions)

    actual = getattr(employee, predicate.field)
    if not actual:
        return False
    actual = actual.casefold()
    expected = predicate.value.casefold()
    if predicate.mode == "equals":
        return actual == expected
    return expected in actual
