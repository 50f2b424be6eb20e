"""Queries and updates over record properties.

A record's fields double as an object's properties. Queries pick fields
by name, optionally descending into nested records; updates replace,
add or lock fields. Both operate on a copy and leave their input alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from candy_values.errors import PropertyError, PropertyErrorKind
from candy_values.types import Field, Record, Value


@dataclass(frozen=True)
class Query:
    """Select the property called name; next narrows a nested record."""

    name: str
    next: tuple[Query, ...] = ()


class QueryModeKind(Enum):
    ALL = "all"
    SOME = "some"


@dataclass(frozen=True)
class QueryMode:
    kind: QueryModeKind
    queries: tuple[Query, ...] = ()

    @classmethod
    def all(cls) -> QueryMode:
        return cls(QueryModeKind.ALL)

    @classmethod
    def some(cls, queries: Iterable[Query]) -> QueryMode:
        return cls(QueryModeKind.SOME, tuple(queries))


class UpdateModeKind(Enum):
    SET = "set"
    LOCK = "lock"
    NEXT = "next"


@dataclass(frozen=True)
class UpdateMode:
    """How an Update changes its property.

    SET replaces the value, LOCK replaces it and marks the field immutable,
    NEXT applies nested updates to a record-valued property.
    """

    kind: UpdateModeKind
    value: Value | None = None
    updates: tuple[Update, ...] = ()

    @classmethod
    def set(cls, value: Value) -> UpdateMode:
        return cls(UpdateModeKind.SET, value=value)

    @classmethod
    def lock(cls, value: Value) -> UpdateMode:
        return cls(UpdateModeKind.LOCK, value=value)

    @classmethod
    def next(cls, updates: Iterable[Update]) -> UpdateMode:
        return cls(UpdateModeKind.NEXT, updates=tuple(updates))


@dataclass(frozen=True)
class Update:
    name: str
    mode: UpdateMode


@dataclass(frozen=True)
class UpdateRequest:
    """Updates addressed to one object."""

    id: str
    updates: tuple[Update, ...] = field(default_factory=tuple)

    def apply(self, fields: Iterable[Field]) -> list[Field]:
        return update_properties(fields, self.updates)


def _find(fields: list[Field], name: str) -> int | None:
    for i, f in enumerate(fields):
        if f.name == name:
            return i
    return None


def _nested_fields(f: Field) -> list[Field]:
    if not isinstance(f.value, Record):
        raise PropertyError(PropertyErrorKind.INVALID_REQUEST, f.name)
    return list(f.value.fields)


def select_properties(fields: Iterable[Field], mode: QueryMode) -> list[Field]:
    """Return the fields a query mode selects.

    Raises:
        PropertyError: NOT_FOUND for a missing name, INVALID_REQUEST when a
            nested query targets a field that is not a record.
    """
    props = list(fields)
    if mode.kind is QueryModeKind.ALL:
        return props

    result: list[Field] = []
    for query in mode.queries:
        index = _find(props, query.name)
        if index is None:
            raise PropertyError(PropertyErrorKind.NOT_FOUND, query.name)
        found = props[index]
        if query.next:
            nested = select_properties(_nested_fields(found), QueryMode.some(query.next))
            found = Field(found.name, Record(tuple(nested)), found.immutable)
        result.append(found)
    return result


def update_properties(fields: Iterable[Field], updates: Iterable[Update]) -> list[Field]:
    """Apply updates in order and return the new field list.

    Raises:
        PropertyError: IMMUTABLE when touching a locked field, NOT_FOUND when
            a nested update names a missing field, INVALID_REQUEST when it
            names a field that is not a record.
    """
    props = list(fields)
    for update in updates:
        index = _find(props, update.name)
        current = None if index is None else props[index]
        if current is not None and current.immutable:
            raise PropertyError(PropertyErrorKind.IMMUTABLE, update.name)

        mode = update.mode
        if mode.kind is UpdateModeKind.NEXT:
            if current is None:
                raise PropertyError(PropertyErrorKind.NOT_FOUND, update.name)
            nested = update_properties(_nested_fields(current), mode.updates)
            replacement = Field(current.name, Record(tuple(nested)), current.immutable)
        else:
            if mode.value is None:
                raise PropertyError(PropertyErrorKind.INVALID_REQUEST, update.name)
            replacement = Field(update.name, mode.value, mode.kind is UpdateModeKind.LOCK)

        if index is None:
            props.append(replacement)
        else:
            props[index] = replacement
    return props
