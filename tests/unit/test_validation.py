from __future__ import annotations

from typing import Any

from formparams.typing.models import FieldTypeDescriptor, SchemaIssue, SchemaResult
from formparams.typing.enums import FieldKind
from formparams.validation import group_issues, validate_tree


def test_group_issues_single_and_multiple_messages() -> None:
    issues = [
        SchemaIssue(path=("email",), message="Invalid email"),
        SchemaIssue(path=("name",), message="Required"),
        SchemaIssue(path=("email",), message="Too short"),
    ]

    assert group_issues(issues) == {"email": ["Invalid email", "Too short"], "name": "Required"}


def test_group_issues_uses_top_level_key_and_drops_pathless_issues() -> None:
    issues = [
        SchemaIssue(path=("address", "city"), message="Required"),
        SchemaIssue(path=(), message="Min must be less than Max"),
    ]

    assert group_issues(issues) == {"address": "Required"}


class _EvenSchema:
    """Minimal schema capability accepting even numbers only."""

    field_keys = ("n",)

    def introspect(self, key: str) -> FieldTypeDescriptor:
        return FieldTypeDescriptor(kind=FieldKind.NUMBER)

    def validate(self, value: dict[str, Any]) -> SchemaResult:
        if value.get("n", 1) % 2:
            return SchemaResult(success=False, issues=[SchemaIssue(path=("n",), message="Must be even")])
        return SchemaResult(success=True, data=dict(value))


def test_validate_tree_with_custom_schema() -> None:
    ok = validate_tree({"n": 2}, _EvenSchema())
    ko = validate_tree({"n": 3}, _EvenSchema())

    assert (ok.success, ok.data, ok.errors) == (True, {"n": 2}, None)
    assert (ko.success, ko.data, ko.errors) == (False, None, {"n": "Must be even"})
