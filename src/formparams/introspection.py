"""HTML input attributes derived from field descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from formparams.backends.pydantic_schema import as_form_schema
from formparams.typing.enums import FieldFormat, FieldKind, InputType
from formparams.typing.models import FieldTypeDescriptor, InputProps

if TYPE_CHECKING:
    from collections.abc import Callable

    from formparams.settings import Settings

_FORMAT_INPUT_TYPES = {
    FieldFormat.EMAIL: InputType.EMAIL,
    FieldFormat.URL: InputType.URL,
}
_KIND_INPUT_TYPES = {
    FieldKind.NUMBER: InputType.NUMBER,
    FieldKind.BOOLEAN: InputType.CHECKBOX,
    FieldKind.DATE: InputType.DATE,
}


def input_type(descriptor: FieldTypeDescriptor) -> InputType:
    """Choose the HTML input type for a descriptor.

    Arrays use the type of their elements.

    Args:
        descriptor (FieldTypeDescriptor): Field descriptor.

    Returns:
        InputType: Input type, `InputType.TEXT` when nothing more specific applies.
    """
    target = _control_target(descriptor)
    if target.format is not None:
        return _FORMAT_INPUT_TYPES[target.format]
    return _KIND_INPUT_TYPES.get(target.kind, InputType.TEXT)


def input_props(key: str, descriptor: FieldTypeDescriptor) -> dict[str, Any]:
    """Build the input attribute mapping for one field.

    Args:
        key (str): Field key, used as the control name.
        descriptor (FieldTypeDescriptor): Field descriptor.

    Returns:
        dict[str, Any]: Attributes such as ``type``, ``name``, ``required``,
        ``minLength``/``maxLength``, ``min``/``max`` and ``pattern``.
    """
    target = _control_target(descriptor)
    props = InputProps(type=input_type(descriptor), name=key, required=descriptor.is_required)
    if target.kind == FieldKind.STRING:
        props.min_length = target.min_length
        props.max_length = target.max_length
        props.pattern = target.pattern
    elif target.kind == FieldKind.NUMBER:
        props.min = target.minimum
        props.max = target.maximum
    return props.to_attrs()


def use_form_input_props(schema: Any, *, settings: Settings | None = None) -> Callable[[str], dict[str, Any]]:
    """Return a lookup from field key to input attributes.

    Args:
        schema (Any): Pydantic model class or `FormSchema`.
        settings (Settings | None): Runtime settings.

    Returns:
        Callable[[str], dict[str, Any]]: Lookup raising `UnknownFieldError` for undeclared keys.
    """
    form_schema = as_form_schema(schema, settings=settings)

    def _props(key: str) -> dict[str, Any]:
        return input_props(key, form_schema.introspect(key))

    return _props


def _control_target(descriptor: FieldTypeDescriptor) -> FieldTypeDescriptor:
    target = descriptor.unwrap()
    if target.kind == FieldKind.ARRAY and target.inner is not None:
        return target.inner.unwrap()
    return target
