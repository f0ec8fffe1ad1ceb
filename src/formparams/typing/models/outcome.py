"""Validation issue, engine result and outcome models."""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

FieldErrors = dict[str, str | list[str]]


class SchemaIssue(BaseModel):
    """One failure reported by the schema engine."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: tuple[str | int, ...] = ()
    message: str
    code: str = "custom"


class SchemaResult(BaseModel):
    """Raw result of a schema engine validation run."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    success: bool
    data: dict[str, Any] | None = None
    issues: list[SchemaIssue] = Field(default_factory=list)


class ValidationOutcome(BaseModel):
    """Result of one extraction and validation pass."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    success: bool
    data: dict[str, Any] | None = None
    errors: FieldErrors | None = None

    @model_validator(mode="after")
    def _check_payload(self) -> Self:
        """Ensure exactly one of `data` and `errors` matches `success`.

        Raises:
            ValueError: If the payload does not match the success flag.

        Returns:
            Self: Validated outcome.
        """
        if self.success and (self.data is None or self.errors is not None):
            raise ValueError("successful outcome must carry data and no errors")  # noqa: TRY003
        if not self.success and (self.errors is None or self.data is not None):
            raise ValueError("failed outcome must carry errors and no data")  # noqa: TRY003
        return self
