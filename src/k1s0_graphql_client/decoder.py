"""Structural decoder: maps GraphQL response data onto dataclass trees.

Target types are described once per type (see :func:`describe`) and the
description is cached. Each dataclass field carries up to two wire names:

* the primary name, taken from the ``graphql`` tag (reduced to its response
  key, so ``"repo: repository(owner: $owner)"`` matches ``repo``) or, for
  untagged fields, the attribute name;
* the secondary name, taken from the ``json`` tag.

In strict mode only primary names match. Otherwise the primary name is tried
first and the secondary name is used when no field declares the primary one.
Fields tagged ``... on Type`` are inline fragments and receive the enclosing
JSON object.
"""

from __future__ import annotations

import dataclasses
import functools
import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .exceptions import DecodeProblem, StructuralDecodeError

GRAPHQL_TAG = "graphql"
JSON_TAG = "json"


def graphql_field(
    graphql: str | None = None,
    *,
    json: str | None = None,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **kwargs: Any,
) -> Any:
    """``dataclasses.field`` with ``graphql`` / ``json`` wire-name tags."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    if graphql is not None:
        metadata[GRAPHQL_TAG] = graphql
    if json is not None:
        metadata[JSON_TAG] = json
    return field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **kwargs,
    )


class Kind(Enum):
    OPAQUE = "opaque"
    SCALAR = "scalar"
    ENUM = "enum"
    NULLABLE = "nullable"
    LIST = "list"
    MAPPING = "mapping"
    RECORD = "record"


@dataclass(frozen=True)
class FieldInfo:
    """Dataclass field as seen by the decoder and query builder."""

    name: str
    annotation: Any
    primary: str
    secondary: str | None
    graphql_tag: str | None
    fragment: bool
    required: bool

    @property
    def selection(self) -> str:
        return self.graphql_tag or self.name

    @property
    def descriptor(self) -> TypeDescriptor:
        return describe(self.annotation)


@dataclass(frozen=True)
class TypeDescriptor:
    kind: Kind
    python_type: Any
    inner: Any = None
    fields: tuple[FieldInfo, ...] = ()
    by_primary: Mapping[str, FieldInfo] = field(default_factory=dict)
    by_secondary: Mapping[str, FieldInfo] = field(default_factory=dict)
    fragments: tuple[FieldInfo, ...] = ()

    @property
    def item(self) -> TypeDescriptor:
        return describe(self.inner)

    def resolve(self, key: str, strict: bool) -> FieldInfo | None:
        info = self.by_primary.get(key)
        if info is None and not strict:
            info = self.by_secondary.get(key)
        return info


def response_key(tag: str) -> str:
    """Reduce a ``graphql`` tag to the key the server answers with."""
    name = tag.split("(", 1)[0]
    if ":" in name:
        name = name.split(":", 1)[0]
    return name.strip()


@functools.cache
def describe(tp: Any) -> TypeDescriptor:
    """Build the (cached) descriptor for a target annotation."""
    if tp is Any or tp is object or tp is dict:
        return TypeDescriptor(Kind.OPAQUE, tp)

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is Union or origin is types.UnionType:
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) == 1 and len(non_none) < len(args):
            return TypeDescriptor(Kind.NULLABLE, tp, inner=non_none[0])
        raise TypeError(f"unsupported union type {tp!r}; only T | None is allowed")
    if origin is list or tp is list:
        return TypeDescriptor(Kind.LIST, tp, inner=args[0] if args else Any)
    if origin is dict:
        if len(args) == 2 and args[1] is not Any:
            return TypeDescriptor(Kind.MAPPING, tp, inner=args[1])
        return TypeDescriptor(Kind.OPAQUE, tp)

    if isinstance(tp, type):
        if issubclass(tp, Enum):
            return TypeDescriptor(Kind.ENUM, tp)
        if issubclass(tp, (bool, int, float, str)):
            return TypeDescriptor(Kind.SCALAR, tp)
        if dataclasses.is_dataclass(tp):
            return _describe_record(tp)

    raise TypeError(f"unsupported target type {tp!r}")


def _describe_record(cls: type) -> TypeDescriptor:
    hints = typing.get_type_hints(cls)
    infos: list[FieldInfo] = []
    by_primary: dict[str, FieldInfo] = {}
    by_secondary: dict[str, FieldInfo] = {}
    fragments: list[FieldInfo] = []
    for f in dataclasses.fields(cls):
        tag = f.metadata.get(GRAPHQL_TAG)
        fragment = tag is not None and tag.strip().startswith("...")
        info = FieldInfo(
            name=f.name,
            annotation=hints[f.name],
            primary=f.name if tag is None else response_key(tag),
            secondary=f.metadata.get(JSON_TAG),
            graphql_tag=tag,
            fragment=fragment,
            required=(
                f.init
                and f.default is dataclasses.MISSING
                and f.default_factory is dataclasses.MISSING
            ),
        )
        infos.append(info)
        if fragment:
            fragments.append(info)
            continue
        by_primary.setdefault(info.primary, info)
        if info.secondary is not None:
            by_secondary.setdefault(info.secondary, info)
    return TypeDescriptor(
        Kind.RECORD,
        cls,
        fields=tuple(infos),
        by_primary=by_primary,
        by_secondary=by_secondary,
        fragments=tuple(fragments),
    )


def zero_value(desc: TypeDescriptor) -> Any:
    """Value an unpopulated slot of this type holds."""
    if desc.kind is Kind.SCALAR:
        return desc.python_type()
    if desc.kind is Kind.LIST:
        return []
    if desc.kind is Kind.MAPPING:
        return {}
    if desc.kind is Kind.RECORD:
        return desc.python_type(
            **{info.name: zero_value(info.descriptor) for info in desc.fields if info.required}
        )
    return None


def new_record(cls: type) -> Any:
    """Instantiate a dataclass with every required field at its zero value."""
    desc = describe(cls)
    if desc.kind is not Kind.RECORD:
        raise TypeError(f"{cls!r} is not a dataclass")
    return zero_value(desc)


_UNCHANGED: Any = object()


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class _Decoder:
    def __init__(self, strict: bool) -> None:
        self.strict = strict
        self.problems: list[DecodeProblem] = []

    def mismatch(self, path: str, raw: Any, desc: TypeDescriptor) -> Any:
        name = getattr(desc.python_type, "__name__", repr(desc.python_type))
        self.problems.append(
            DecodeProblem(path, f"cannot decode JSON {_json_kind(raw)} into {name}")
        )
        return _UNCHANGED

    def unsupported(self, path: str, error: TypeError) -> Any:
        self.problems.append(DecodeProblem(path, str(error)))
        return _UNCHANGED

    def value(self, raw: Any, desc: TypeDescriptor, current: Any, path: str) -> Any:
        try:
            return self._value(raw, desc, current, path)
        except TypeError as e:
            return self.unsupported(path, e)

    def _value(self, raw: Any, desc: TypeDescriptor, current: Any, path: str) -> Any:
        kind = desc.kind
        if kind is Kind.OPAQUE:
            return raw
        if raw is None:
            # null only clears slots that can hold it
            return None if kind is Kind.NULLABLE else _UNCHANGED
        if kind is Kind.NULLABLE:
            return self.value(raw, desc.item, current, path)
        if kind is Kind.SCALAR:
            return self.scalar(raw, desc, path)
        if kind is Kind.ENUM:
            try:
                return desc.python_type(raw)
            except ValueError:
                self.problems.append(
                    DecodeProblem(path, f"{raw!r} is not a valid {desc.python_type.__name__}")
                )
                return _UNCHANGED
        if kind is Kind.RECORD:
            if not isinstance(raw, dict):
                return self.mismatch(path, raw, desc)
            target = current if isinstance(current, desc.python_type) else zero_value(desc)
            self.record(raw, desc, target, path)
            return target
        if kind is Kind.LIST:
            if not isinstance(raw, list):
                return self.mismatch(path, raw, desc)
            item = desc.item
            items = []
            for i, element in enumerate(raw):
                decoded = self.value(element, item, None, f"{path}[{i}]")
                items.append(zero_value(item) if decoded is _UNCHANGED else decoded)
            return items
        if kind is Kind.MAPPING:
            if not isinstance(raw, dict):
                return self.mismatch(path, raw, desc)
            item = desc.item
            entries = {}
            for key, element in raw.items():
                decoded = self.value(element, item, None, _join(path, key))
                entries[key] = zero_value(item) if decoded is _UNCHANGED else decoded
            return entries
        raise AssertionError(f"unhandled kind {kind}")

    def scalar(self, raw: Any, desc: TypeDescriptor, path: str) -> Any:
        tp = desc.python_type
        is_bool = isinstance(raw, bool)
        if issubclass(tp, bool):
            ok = is_bool
        elif issubclass(tp, int):
            ok = not is_bool and (
                isinstance(raw, int) or (isinstance(raw, float) and raw.is_integer())
            )
        elif issubclass(tp, float):
            ok = not is_bool and isinstance(raw, (int, float))
        else:
            ok = isinstance(raw, str)
        if not ok:
            return self.mismatch(path, raw, desc)
        return raw if type(raw) is tp else tp(raw)

    def record(self, raw: dict[str, Any], desc: TypeDescriptor, target: Any, path: str) -> None:
        assigned: set[str] = set()
        for key, member in raw.items():
            info = desc.resolve(key, self.strict)
            if info is None or info.name in assigned:
                continue
            assigned.add(info.name)
            field_path = _join(path, key)
            try:
                field_desc = info.descriptor
            except TypeError as e:
                self.unsupported(field_path, e)
                continue
            new = self.value(member, field_desc, getattr(target, info.name), field_path)
            if new is not _UNCHANGED:
                setattr(target, info.name, new)

        for info in desc.fragments:
            current = getattr(target, info.name)
            try:
                frag = info.descriptor
                if frag.kind is Kind.NULLABLE and current is None and not self.matches(raw, frag.item):
                    continue
            except TypeError as e:
                self.unsupported(_join(path, info.name), e)
                continue
            new = self.value(raw, frag, current, path)
            if new is not _UNCHANGED:
                setattr(target, info.name, new)

    def matches(self, raw: dict[str, Any], desc: TypeDescriptor) -> bool:
        """Whether any member of ``raw`` lands in the record ``desc``."""
        if desc.kind is not Kind.RECORD:
            return True
        if any(desc.resolve(key, self.strict) is not None for key in raw):
            return True
        return any(self.matches(raw, f.descriptor) for f in desc.fragments)


def unmarshal_graphql(data: Any, target: Any, strict: bool = False) -> Any:
    """Populate ``target`` in place from GraphQL response ``data``.

    ``target`` is a dataclass instance, a dict (updated with the verbatim
    data) or a list (contents replaced). All mismatches are collected and
    raised together as one StructuralDecodeError; fields decoded before or
    after a mismatch keep their values.
    """
    if isinstance(target, dict):
        if not isinstance(data, dict):
            raise StructuralDecodeError(
                [DecodeProblem("", f"cannot decode JSON {_json_kind(data)} into dict")]
            )
        target.update(data)
        return target
    if isinstance(target, list):
        if not isinstance(data, list):
            raise StructuralDecodeError(
                [DecodeProblem("", f"cannot decode JSON {_json_kind(data)} into list")]
            )
        target[:] = data
        return target
    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise TypeError(
            f"decode target must be a dataclass instance, dict or list, got {type(target).__name__}"
        )

    desc = describe(type(target))
    decoder = _Decoder(strict)
    if isinstance(data, dict):
        decoder.record(data, desc, target, "")
    else:
        decoder.mismatch("", data, desc)
    if decoder.problems:
        raise StructuralDecodeError(decoder.problems)
    return target


def decode_value(data: Any, annotation: Any, strict: bool = False) -> Any:
    """Decode ``data`` into a fresh value of type ``annotation``."""
    desc = describe(annotation)
    decoder = _Decoder(strict)
    value = decoder.value(data, desc, None, "")
    if decoder.problems:
        raise StructuralDecodeError(decoder.problems)
    return zero_value(desc) if value is _UNCHANGED else value
