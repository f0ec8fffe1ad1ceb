"""Typing-centric domain modules."""

from formparams.typing.enums import FieldFormat, FieldKind, InputType, RepeatedKeyPolicy
from formparams.typing.models import (
    Control,
    FieldErrors,
    FieldState,
    FieldTypeDescriptor,
    FormControls,
    FormValidationState,
    InputProps,
    SchemaIssue,
    SchemaResult,
    ValidationOutcome,
)
from formparams.typing.protocol import ControlSource, FormRequest, FormSchema, SearchRequest

__all__ = [
    "Control",
    "ControlSource",
    "FieldErrors",
    "FieldFormat",
    "FieldKind",
    "FieldState",
    "FieldTypeDescriptor",
    "FormControls",
    "FormRequest",
    "FormSchema",
    "FormValidationState",
    "InputProps",
    "InputType",
    "RepeatedKeyPolicy",
    "SchemaIssue",
    "SchemaResult",
    "SearchRequest",
    "ValidationOutcome",
]
