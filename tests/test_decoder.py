"""Structural decoder unit tests."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

import pytest

from k1s0_graphql_client import (
    ID,
    StructuralDecodeError,
    decode_value,
    graphql_field,
    unmarshal_graphql,
)


class Status(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass
class Label:
    name: str = ""


@dataclass
class Issue:
    id: ID = ID("")
    number: int = 0
    score: float = 0.0
    closed: bool = False
    status: Status | None = None
    labels: list[Label] = field(default_factory=list)


@dataclass
class TaggedNode:
    node_id: str = graphql_field("id", json="nodeId", default="")
    title: str = graphql_field(json="title", default="")
    secondary_only: str = graphql_field(json="legacyName", default="")


@dataclass
class AliasQuery:
    repo: Issue | None = graphql_field("repo: repository(owner: $owner, name: $name)", default=None)


@dataclass
class User:
    login: str = ""


@dataclass
class Bot:
    app_name: str = graphql_field("appName", default="")


@dataclass
class Actor:
    typename: str = graphql_field("__typename", default="")
    user: User | None = graphql_field("... on User", default=None)
    bot: Bot | None = graphql_field("... on Bot", default=None)


@dataclass
class TreeNode:
    value: int = 0
    children: list["TreeNode"] = field(default_factory=list)


@dataclass
class WithOpaque:
    id: str = ""
    payload: Any = None
    attrs: dict = field(default_factory=dict)
    counts: dict[str, int] = field(default_factory=dict)


@dataclass
class Required:
    name: str
    inner: Label
    tags: list[str]


@dataclass
class Event:
    at: datetime | None = None
    name: str = ""


@dataclass
class EventQuery:
    event: Event | None = None
    total: int = 0


def test_scalars_and_nested_lists() -> None:
    issue = Issue()
    unmarshal_graphql(
        {
            "id": "MDU6SXNzdWUx",
            "number": 42,
            "score": 3,
            "closed": True,
            "status": "CLOSED",
            "labels": [{"name": "bug"}, {"name": "help wanted"}],
        },
        issue,
    )
    assert issue.id == "MDU6SXNzdWUx"
    assert isinstance(issue.id, ID)
    assert issue.number == 42
    assert issue.score == 3.0
    assert isinstance(issue.score, float)
    assert issue.closed is True
    assert issue.status is Status.CLOSED
    assert issue.labels == [Label("bug"), Label("help wanted")]


def test_unknown_members_ignored_and_missing_fields_keep_zero() -> None:
    issue = Issue()
    unmarshal_graphql({"number": 7, "unknownField": {"deep": 1}}, issue)
    assert issue.number == 7
    assert issue.id == ""
    assert issue.labels == []


def test_list_is_resized_to_input_length() -> None:
    issue = Issue(labels=[Label("a"), Label("b"), Label("c")])
    unmarshal_graphql({"labels": [{"name": "x"}]}, issue)
    assert issue.labels == [Label("x")]


def test_null_clears_nullable_slot_only() -> None:
    issue = Issue(number=5, status=Status.OPEN)
    unmarshal_graphql({"status": None, "number": None}, issue)
    assert issue.status is None
    assert issue.number == 5


def test_nullable_record_allocated() -> None:
    query = AliasQuery()
    unmarshal_graphql({"repo": {"number": 1}}, query)
    assert query.repo is not None
    assert query.repo.number == 1


def test_nullable_record_null() -> None:
    query = AliasQuery(repo=Issue(number=9))
    unmarshal_graphql({"repo": None}, query)
    assert query.repo is None


def test_primary_tag_preferred_over_secondary() -> None:
    node = TaggedNode()
    unmarshal_graphql({"id": "primary", "title": "t"}, node)
    assert node.node_id == "primary"
    assert node.title == "t"


def test_secondary_tag_used_when_not_strict() -> None:
    node = TaggedNode()
    unmarshal_graphql({"nodeId": "from-json", "legacyName": "legacy"}, node, strict=False)
    assert node.node_id == "from-json"
    assert node.secondary_only == "legacy"


def test_strict_ignores_secondary_tag() -> None:
    node = TaggedNode()
    unmarshal_graphql({"nodeId": "from-json", "legacyName": "legacy", "id": "x"}, node, strict=True)
    assert node.node_id == "x"
    assert node.secondary_only == ""


def test_field_set_at_most_once() -> None:
    node = TaggedNode()
    unmarshal_graphql({"id": "first", "nodeId": "second"}, node)
    assert node.node_id == "first"


def test_inline_fragments() -> None:
    actor = Actor()
    unmarshal_graphql({"__typename": "Bot", "appName": "dependabot"}, actor)
    assert actor.typename == "Bot"
    assert actor.bot is not None
    assert actor.bot.app_name == "dependabot"
    assert actor.user is None


def test_recursive_type() -> None:
    root = decode_value(
        {"value": 1, "children": [{"value": 2, "children": [{"value": 3}]}]},
        TreeNode,
    )
    assert root.children[0].children[0].value == 3
    assert root.children[0].children[0].children == []


def test_opaque_passthrough() -> None:
    target = WithOpaque()
    unmarshal_graphql(
        {
            "id": "1",
            "payload": {"test": "successful", "even": {"nested": "objects?"}},
            "attrs": {"a": [1, 2]},
            "counts": {"x": 1, "y": 2},
        },
        target,
    )
    assert target.payload == {"test": "successful", "even": {"nested": "objects?"}}
    assert target.attrs == {"a": [1, 2]}
    assert target.counts == {"x": 1, "y": 2}


def test_type_mismatch_reports_path_and_keeps_siblings() -> None:
    issue = Issue()
    with pytest.raises(StructuralDecodeError) as exc_info:
        unmarshal_graphql(
            {
                "number": "not a number",
                "closed": True,
                "labels": [{"name": "ok"}, {"name": 5}],
            },
            issue,
        )
    paths = [p.path for p in exc_info.value.problems]
    assert paths == ["number", "labels[1].name"]
    assert "cannot decode JSON string into int" in str(exc_info.value)
    assert issue.closed is True
    assert issue.number == 0
    assert issue.labels == [Label("ok"), Label("")]


def test_bool_is_not_an_int() -> None:
    issue = Issue()
    with pytest.raises(StructuralDecodeError):
        unmarshal_graphql({"number": True}, issue)


def test_invalid_enum_value() -> None:
    issue = Issue()
    with pytest.raises(StructuralDecodeError) as exc_info:
        unmarshal_graphql({"status": "MERGED"}, issue)
    assert exc_info.value.problems[0].path == "status"


def test_record_expected_but_scalar_given() -> None:
    query = AliasQuery()
    with pytest.raises(StructuralDecodeError):
        unmarshal_graphql({"repo": "oops"}, query)
    assert query.repo is None


def test_required_fields_get_zero_values() -> None:
    value = decode_value({"inner": {"name": "n"}}, Required)
    assert value == Required(name="", inner=Label("n"), tags=[])


def test_optional_typing_form() -> None:
    assert decode_value(None, Optional[int]) is None
    assert decode_value(3, Optional[int]) == 3


def test_dict_and_list_targets() -> None:
    as_dict: dict = {"stale": True}
    unmarshal_graphql({"a": 1}, as_dict)
    assert as_dict == {"stale": True, "a": 1}

    as_list: list = [1, 2, 3]
    unmarshal_graphql([4], as_list)
    assert as_list == [4]


def test_unsupported_target() -> None:
    with pytest.raises(TypeError):
        unmarshal_graphql({}, 42)


def test_unsupported_field_type_is_a_decode_problem() -> None:
    query = EventQuery()
    with pytest.raises(StructuralDecodeError) as exc_info:
        unmarshal_graphql(
            {"event": {"at": "2024-01-01T00:00:00Z", "name": "deploy"}, "total": 3},
            query,
        )
    problems = exc_info.value.problems
    assert [p.path for p in problems] == ["event.at"]
    assert "unsupported target type" in problems[0].description
    assert query.event == Event(at=None, name="deploy")
    assert query.total == 3
