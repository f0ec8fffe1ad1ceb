"""Core domain model exports."""

from formparams.typing.models.descriptor import FieldTypeDescriptor, InputProps
from formparams.typing.models.outcome import FieldErrors, SchemaIssue, SchemaResult, ValidationOutcome
from formparams.typing.models.state import Control, FieldState, FormControls, FormValidationState

__all__ = [
    "Control",
    "FieldErrors",
    "FieldState",
    "FieldTypeDescriptor",
    "FormControls",
    "FormValidationState",
    "InputProps",
    "SchemaIssue",
    "SchemaResult",
    "ValidationOutcome",
]
