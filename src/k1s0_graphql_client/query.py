"""Builds GraphQL documents from dataclass shapes."""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from .decoder import Kind, TypeDescriptor, describe
from .exceptions import QueryBuildError
from .types import ID, OperationType, TypedValue


def construct_query(shape: Any, variables: dict[str, Any] | None = None, name: str = "") -> str:
    return construct_operation(OperationType.QUERY, shape, variables, name)


def construct_mutation(shape: Any, variables: dict[str, Any] | None = None, name: str = "") -> str:
    return construct_operation(OperationType.MUTATION, shape, variables, name)


def construct_operation(
    op: OperationType,
    shape: Any,
    variables: dict[str, Any] | None = None,
    name: str = "",
) -> str:
    """Render ``op`` for ``shape`` (a dataclass type or instance).

    A shape with one field tagged ``user(login: $login)`` holding a record
    with a ``name`` field, named ``GetUser`` with ``{"login": "octocat"}``,
    renders as ``query GetUser($login:String!){user(login: $login){name}}``.
    """
    shape_type = shape if isinstance(shape, type) else type(shape)
    try:
        desc = describe(shape_type)
    except TypeError as e:
        raise QueryBuildError(f"cannot build {op.value} from {shape_type!r}: {e}") from e
    if desc.kind is not Kind.RECORD:
        raise QueryBuildError(f"cannot build {op.value} from {shape_type!r}: not a dataclass")

    body = selection_set(desc)
    if op is OperationType.QUERY and not name and not variables:
        return body
    head = op.value
    if name:
        head += " " + name
    if variables:
        head += "(" + query_arguments(variables) + ")"
    return head + body


def selection_set(desc: TypeDescriptor, _seen: tuple[type, ...] = ()) -> str:
    if desc.python_type in _seen:
        raise QueryBuildError(f"recursive shape {desc.python_type.__name__} has no finite selection")
    seen = _seen + (desc.python_type,)
    parts = []
    for info in desc.fields:
        try:
            child = _child_selection(info.descriptor, seen)
        except TypeError as e:
            raise QueryBuildError(
                f"cannot select {desc.python_type.__name__}.{info.name}: {e}"
            ) from e
        parts.append(info.selection + child)
    return "{" + ",".join(parts) + "}"


def _child_selection(desc: TypeDescriptor, seen: tuple[type, ...]) -> str:
    while desc.kind in (Kind.NULLABLE, Kind.LIST):
        desc = desc.item
    if desc.kind is Kind.RECORD:
        return selection_set(desc, seen)
    return ""


def query_arguments(variables: dict[str, Any]) -> str:
    """Variable definitions sorted by name, e.g. ``$id:ID!$first:Int!``."""
    return "".join(f"${key}:{variable_type(variables[key])}" for key in sorted(variables))


def variable_type(value: Any) -> str:
    if isinstance(value, TypedValue):
        return value.graphql_type
    if value is None:
        raise QueryBuildError("cannot infer the GraphQL type of a null variable; use TypedValue")
    if isinstance(value, bool):
        return "Boolean!"
    if isinstance(value, Enum):
        return type(value).__name__ + "!"
    if isinstance(value, ID):
        return "ID!"
    if isinstance(value, int):
        return "Int!"
    if isinstance(value, float):
        return "Float!"
    if isinstance(value, str):
        return "String!"
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return type(value).__name__ + "!"
    if isinstance(value, (list, tuple)):
        if not value:
            raise QueryBuildError("cannot infer the GraphQL type of an empty list; use TypedValue")
        return f"[{variable_type(value[0])}]!"
    raise QueryBuildError(f"unsupported variable type {type(value).__name__}")
