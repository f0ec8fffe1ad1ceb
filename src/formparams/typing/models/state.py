"""Form validation state and form control models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_CHECKABLE_TYPES = frozenset({"checkbox", "radio"})


class FieldState(BaseModel):
    """Validation state of a single form field."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    key: str
    value: Any = None
    touched: bool = False
    required: bool = True
    success: bool = False
    error: str | list[str] | None = None


class FormValidationState(BaseModel):
    """Validation state of a whole form."""

    model_config = ConfigDict(extra="forbid")

    success: bool = False
    field: dict[str, FieldState] = Field(default_factory=dict)


class Control(BaseModel):
    """A form control as seen at event time."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    name: str
    value: Any = ""
    type: str = "text"
    checked: bool = False

    def submitted_values(self) -> list[Any]:
        """Return the values this control contributes to a submission.

        Returns:
            list[Any]: Zero or more raw values.
        """
        if self.type in _CHECKABLE_TYPES:
            return [self.value] if self.checked else []
        if isinstance(self.value, list):
            return list(self.value)
        return [self.value]


class FormControls(BaseModel):
    """Snapshot of the controls currently present in a form."""

    model_config = ConfigDict(extra="forbid")

    controls: list[Control] = Field(default_factory=list)

    def entries_for(self, key: str) -> list[tuple[str, Any]]:
        """Collect the submitted entries of every control belonging to a field.

        A control belongs to `key` when it is named `key` or its name continues
        with a path segment, as in ``key[]``, ``key[0]`` or ``key.city``.

        Args:
            key (str): Top-level field key.

        Returns:
            list[tuple[str, Any]]: (control name, value) pairs in document order.
        """
        entries: list[tuple[str, Any]] = []
        for control in self.controls:
            if control.name == key or control.name.startswith((f"{key}[", f"{key}.")):
                entries.extend((control.name, value) for value in control.submitted_values())
        return entries
