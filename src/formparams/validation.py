"""Schema validation of coerced trees."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from formparams.logging import get_logger
from formparams.typing.models import FieldErrors, ValidationOutcome

if TYPE_CHECKING:
    from collections.abc import Iterable

    from formparams.typing.models import SchemaIssue
    from formparams.typing.protocol import FormSchema

logger = get_logger(__name__)


def group_issues(issues: Iterable[SchemaIssue]) -> FieldErrors:
    """Group issues under their top-level field key.

    A field with one issue maps to its message, a field with several maps to
    the messages in reporting order. Issues without a field path are dropped.

    Args:
        issues (Iterable[SchemaIssue]): Issues reported by the schema.

    Returns:
        FieldErrors: Messages by top-level field key.
    """
    grouped: dict[str, list[str]] = {}
    for issue in issues:
        if not issue.path or not isinstance(issue.path[0], str):
            logger.debug("Dropped issue without field path", extra={"issue_message": issue.message})
            continue
        grouped.setdefault(issue.path[0], []).append(issue.message)
    return {key: messages[0] if len(messages) == 1 else messages for key, messages in grouped.items()}


def validate_tree(tree: dict[str, Any], schema: FormSchema) -> ValidationOutcome:
    """Validate a coerced tree and normalize the result.

    Args:
        tree (dict[str, Any]): Coerced tree.
        schema (FormSchema): Schema capability.

    Returns:
        ValidationOutcome: Data on success, grouped errors otherwise.
    """
    result = schema.validate(tree)
    if result.success:
        return ValidationOutcome(success=True, data=result.data or {})
    return ValidationOutcome(success=False, errors=group_issues(result.issues))
