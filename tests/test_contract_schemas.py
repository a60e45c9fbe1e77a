"""Contract/schema validation tests."""

from __future__ import annotations

import pytest
from gh_pr_mcp.errors import SafeError
from gh_pr_mcp.tools import (TOOL_METADATA, is_valid_tool_arguments,
                             validate_tool_arguments)


def test_create_pr_requires_title() -> None:
    with pytest.raises(SafeError) as exc:
        validate_tool_arguments("create_pr", {"body": "b"})

    assert "Missing required field: title" in exc.value.message


@pytest.mark.parametrize(
    "bad_args,expected_substring",
    [
        ({"title": 1}, "title"),
        ({"title": "t", "body": 2}, "body"),
        ({"title": "t", "base": None}, "base"),
        ({"title": "t", "head": ["x"]}, "head"),
        ({"title": "t", "draft": "yes"}, "draft"),
    ],
)
def test_create_pr_rejects_invalid_types(bad_args: dict, expected_substring: str) -> None:
    with pytest.raises(SafeError) as exc:
        validate_tool_arguments("create_pr", bad_args)

    assert expected_substring in exc.value.message


def test_extra_fields_are_ignored_and_dropped() -> None:
    out = validate_tool_arguments("create_pr", {"title": "t", "extra": "x"})
    assert out == {"title": "t"}


@pytest.mark.parametrize("state", ["open", "closed", "merged", "all"])
def test_list_prs_accepts_every_state(state: str) -> None:
    assert validate_tool_arguments("list_prs", {"state": state}) == {"state": state}


@pytest.mark.parametrize("state", ["draft", "OPEN", "", 1])
def test_list_prs_rejects_state_outside_enum(state: object) -> None:
    assert is_valid_tool_arguments("list_prs", {"state": state}) is False


def test_list_prs_accepts_no_arguments() -> None:
    assert validate_tool_arguments("list_prs", {}) == {}


@pytest.mark.parametrize("limit", ["5", True, float("nan")])
def test_list_prs_rejects_non_numeric_limit(limit: object) -> None:
    assert is_valid_tool_arguments("list_prs", {"limit": limit}) is False


def test_list_prs_normalizes_integral_float_limit() -> None:
    assert validate_tool_arguments("list_prs", {"limit": 5.0}) == {"limit": 5}


@pytest.mark.parametrize("tool_name", ["view_pr", "comment_pr"])
@pytest.mark.parametrize("number", [0, -1, 1.5, "1", True, None])
def test_pr_number_must_be_positive_integer(tool_name: str, number: object) -> None:
    args = {"number": number, "body": "b"}
    assert is_valid_tool_arguments(tool_name, args) is False


def test_pr_number_accepts_integral_float() -> None:
    assert validate_tool_arguments("view_pr", {"number": 7.0}) == {"number": 7}


def test_comment_pr_requires_body() -> None:
    with pytest.raises(SafeError) as exc:
        validate_tool_arguments("comment_pr", {"number": 1})

    assert "body" in exc.value.message


@pytest.mark.parametrize("arguments", [None, [], "title", 3])
def test_non_object_arguments_are_invalid(arguments: object) -> None:
    assert is_valid_tool_arguments("list_prs", arguments) is False


def test_unknown_tool_is_not_found() -> None:
    with pytest.raises(SafeError) as exc:
        validate_tool_arguments("merge_pr", {})

    assert exc.value.code == "NotFound"


def test_every_tool_schema_is_an_object_schema() -> None:
    for meta in TOOL_METADATA.values():
        assert meta["inputSchema"]["type"] == "object"
        assert meta["description"]
