"""Schema engine and request interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from formparams.typing.models import FieldTypeDescriptor, SchemaResult


class FormSchema(Protocol):
    """Validation engine capability consumed by the pipeline."""

    @property
    def field_keys(self) -> tuple[str, ...]:
        """Return the declared top-level field keys.

        Returns:
            tuple[str, ...]: Field keys in declaration order.
        """

    def validate(self, value: dict[str, Any]) -> SchemaResult:
        """Validate a coerced tree.

        Args:
            value: Coerced tree keyed by top-level field.

        Returns:
            SchemaResult: Accepted data or reported issues.
        """

    def introspect(self, key: str) -> FieldTypeDescriptor:
        """Return the type descriptor of a top-level field.

        Args:
            key: Top-level field key.

        Returns:
            FieldTypeDescriptor: Field descriptor.
        """


class SearchRequest(Protocol):
    """Anything carrying a URL, e.g. `httpx.Request` or a starlette request."""

    url: Any


class FormRequest(Protocol):
    """Anything exposing an awaitable multipart/urlencoded body."""

    async def form(self) -> Any:
        """Materialize the request body as a multi-valued container.

        Returns:
            Any: Container of key/value pairs.
        """


class ControlSource(Protocol):
    """Handle on the controls currently rendered in a form."""

    def entries_for(self, key: str) -> Iterable[tuple[str, Any]]:
        """Return the submitted entries of every control belonging to a field.

        Args:
            key: Top-level field key; controls named `key`, `key[...]` or `key.*` belong to it.

        Returns:
            Iterable[tuple[str, Any]]: (control name, raw value) pairs in document order.
        """
