"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass, field


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class SchemaError(PackageError):
    """Raised when a schema cannot be adapted or introspected."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class UnknownFieldError(PackageError):
    """Raised when a field key is not declared by the schema."""

    key: str
    known_keys: tuple[str, ...] = ()

    def __str__(self) -> str:
        """Return error message payload."""
        known = ", ".join(self.known_keys) or "<none>"
        return f"Unknown field '{self.key}'. Expected one of: {known}"


@dataclass(frozen=True)
class FormValidationError(PackageError):
    """Raised by `get_params_or_fail` when the input does not validate."""

    errors: dict[str, str | list[str]] = field(default_factory=dict)
    message: str = "Form validation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {', '.join(sorted(self.errors))}" if self.errors else self.message


class RefinementError(ValueError):
    """Cross-field validation failure raised from a schema validator.

    Raise it from a pydantic ``model_validator`` to attach the failure to a
    field; without ``path`` the failure is not reported under any field.
    """

    def __init__(self, message: str, path: tuple[str | int, ...] | list[str | int] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.path = tuple(path)
