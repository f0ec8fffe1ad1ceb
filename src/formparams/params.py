"""Extraction of typed parameters from query strings, forms and mappings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from formparams.backends.pydantic_schema import as_form_schema
from formparams.exceptions import FormValidationError
from formparams.logging import get_logger
from formparams.processing.coercion import coerce_tree
from formparams.processing.paths import decode_entries, iter_entries
from formparams.settings import Settings, get_settings
from formparams.validation import validate_tree

if TYPE_CHECKING:
    from formparams.typing.models import ValidationOutcome
    from formparams.typing.protocol import FormRequest, SearchRequest

logger = get_logger(__name__)


def get_params(source: Any, schema: Any, *, settings: Settings | None = None) -> ValidationOutcome:
    """Decode, coerce and validate flat key/value input.

    Data-shaped problems never raise; they are reported in the outcome.

    Args:
        source (Any): Query string, multi-valued container, mapping or iterable of pairs.
        schema (Any): Pydantic model class or `FormSchema`.
        settings (Settings | None): Runtime settings.

    Returns:
        ValidationOutcome: `data` on success, `errors` by top-level field otherwise.
    """
    config = settings or get_settings()
    form_schema = as_form_schema(schema, settings=config)
    field_keys = form_schema.field_keys

    tree = decode_entries(iter_entries(source), field_keys)
    descriptors = {key: form_schema.introspect(key) for key in field_keys}
    coerced = coerce_tree(tree, descriptors, policy=config.repeated_key_policy)
    outcome = validate_tree(coerced, form_schema)

    logger.debug(
        "Parameters validated",
        extra={"success": outcome.success, "error_fields": sorted(outcome.errors or {})},
    )
    return outcome


def get_search_params(
    request: SearchRequest | str,
    schema: Any,
    *,
    settings: Settings | None = None,
) -> ValidationOutcome:
    """Validate the query string of a request URL.

    Args:
        request (SearchRequest | str): Object with a ``url`` attribute, or the URL itself.
        schema (Any): Pydantic model class or `FormSchema`.
        settings (Settings | None): Runtime settings.

    Returns:
        ValidationOutcome: Validation outcome.
    """
    raw_url = request if isinstance(request, str) else request.url
    url = httpx.URL(str(raw_url))
    return get_params(url.params, schema, settings=settings)


async def get_form_data(
    request: FormRequest,
    schema: Any,
    *,
    settings: Settings | None = None,
) -> ValidationOutcome:
    """Validate the form body of a request.

    Args:
        request (FormRequest): Object whose ``form()`` coroutine returns the body container.
        schema (Any): Pydantic model class or `FormSchema`.
        settings (Settings | None): Runtime settings.

    Returns:
        ValidationOutcome: Validation outcome.
    """
    form = await request.form()
    return get_params(form, schema, settings=settings)


def get_params_or_fail(source: Any, schema: Any, *, settings: Settings | None = None) -> dict[str, Any]:
    """Same as `get_params` but raise instead of returning a failed outcome.

    Args:
        source (Any): Input container.
        schema (Any): Pydantic model class or `FormSchema`.
        settings (Settings | None): Runtime settings.

    Raises:
        FormValidationError: If validation fails; carries the errors mapping.

    Returns:
        dict[str, Any]: Validated data.
    """
    outcome = get_params(source, schema, settings=settings)
    if not outcome.success:
        raise FormValidationError(errors=outcome.errors or {})
    return outcome.data or {}
