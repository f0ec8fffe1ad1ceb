"""Field type descriptor and input attribute models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from formparams.typing.enums import FieldFormat, FieldKind, InputType


class FieldTypeDescriptor(BaseModel):
    """Introspectable type and constraint metadata for one schema field."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    kind: FieldKind
    inner: FieldTypeDescriptor | None = None
    fields: dict[str, FieldTypeDescriptor] = Field(default_factory=dict)
    default: Any = None
    enum_values: list[str] = Field(default_factory=list)
    min_length: int | None = None
    max_length: int | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = None
    exclusive_maximum: int | float | None = None
    pattern: str | None = None
    format: FieldFormat | None = None
    date_only: bool = False
    messages: dict[str, str] = Field(default_factory=dict)

    @property
    def is_required(self) -> bool:
        """Return whether an absent value is a validation failure."""
        return self.kind not in {FieldKind.OPTIONAL, FieldKind.DEFAULT}

    def unwrap(self) -> FieldTypeDescriptor:
        """Strip optional/default wrappers.

        Returns:
            FieldTypeDescriptor: The innermost non-wrapper descriptor.
        """
        descriptor = self
        while descriptor.kind in {FieldKind.OPTIONAL, FieldKind.DEFAULT} and descriptor.inner is not None:
            descriptor = descriptor.inner
        return descriptor

    def child(self, segment: str | int) -> FieldTypeDescriptor | None:
        """Return the descriptor reached by one issue path segment.

        Args:
            segment (str | int): Object key or array index.

        Returns:
            FieldTypeDescriptor | None: Child descriptor, if the segment resolves.
        """
        descriptor = self.unwrap()
        if descriptor.kind == FieldKind.ARRAY and isinstance(segment, int):
            return descriptor.inner
        if descriptor.kind == FieldKind.OBJECT and isinstance(segment, str):
            return descriptor.fields.get(segment)
        return None


class InputProps(BaseModel):
    """HTML input attributes for a form control."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: InputType
    name: str
    required: bool
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    min: int | float | None = None
    max: int | float | None = None
    pattern: str | None = None

    def to_attrs(self) -> dict[str, Any]:
        """Return the attribute mapping, omitting unset constraints.

        Returns:
            dict[str, Any]: Attribute name to value.
        """
        attrs = self.model_dump(by_alias=True, exclude_none=True)
        attrs["type"] = self.type.to_str()
        return attrs
