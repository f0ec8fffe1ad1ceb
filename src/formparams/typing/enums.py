"""Project enums."""

from __future__ import annotations

from enum import StrEnum


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class FieldKind(_EnumMixin):
    """Kinds of field type descriptors."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ARRAY = "array"
    ENUM = "enum"
    OBJECT = "object"
    OPTIONAL = "optional"
    DEFAULT = "default"
    UNKNOWN = "unknown"


class FieldFormat(_EnumMixin):
    """String format hints carried by a descriptor."""

    EMAIL = "email"
    URL = "url"


class InputType(_EnumMixin):
    """HTML input types derived from descriptors."""

    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    DATE = "date"
    EMAIL = "email"
    URL = "url"


class RepeatedKeyPolicy(_EnumMixin):
    """Which occurrence of a repeated bare key wins for scalar fields."""

    FIRST = "first"
    LAST = "last"
