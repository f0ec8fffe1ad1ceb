"""Pydantic implementation of the form schema capability."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping, Sequence
from collections.abc import Set as AbstractSet
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from inspect import isclass
from types import NoneType, UnionType
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import AnyUrl, BaseModel, EmailStr, ValidationError
from pydantic.fields import FieldInfo

from formparams.exceptions import RefinementError, SchemaError, UnknownFieldError
from formparams.settings import Settings, get_settings
from formparams.typing.enums import FieldFormat, FieldKind
from formparams.typing.models import FieldTypeDescriptor, SchemaIssue, SchemaResult

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

    from formparams.typing.protocol import FormSchema


_ARRAY_ORIGINS = (list, tuple, set, frozenset, Sequence, AbstractSet)
_CONSTRAINT_TARGETS = {
    "min_length": "min_length",
    "max_length": "max_length",
    "ge": "minimum",
    "le": "maximum",
    "gt": "exclusive_minimum",
    "lt": "exclusive_maximum",
    "pattern": "pattern",
}

_TYPE_ERRORS = frozenset(
    {
        "int_type",
        "int_parsing",
        "int_parsing_size",
        "float_type",
        "float_parsing",
        "decimal_type",
        "decimal_parsing",
        "bool_type",
        "bool_parsing",
        "string_type",
        "date_type",
        "date_parsing",
        "date_from_datetime_parsing",
        "datetime_type",
        "datetime_parsing",
        "datetime_from_date_parsing",
        "datetime_object_invalid",
        "list_type",
        "tuple_type",
        "set_type",
        "frozen_set_type",
        "iterable_type",
        "model_type",
        "model_attributes_type",
        "dict_type",
    },
)
_TOO_SMALL = frozenset({"string_too_short", "too_short", "greater_than", "greater_than_equal"})
_TOO_BIG = frozenset({"string_too_long", "too_long", "less_than", "less_than_equal"})
_FORMAT_MESSAGES = {"pattern": "Invalid", "email": "Invalid email", "url": "Invalid url"}
_EXPECTED_KINDS = {
    "int": "number",
    "float": "number",
    "decimal": "number",
    "bool": "boolean",
    "string": "string",
    "date": "date",
    "datetime": "date",
    "list": "array",
    "tuple": "array",
    "set": "array",
    "frozen": "array",
    "iterable": "array",
    "model": "object",
    "dict": "object",
}


def error_messages(**messages: str) -> dict[str, dict[str, str]]:
    """Build a `json_schema_extra` payload carrying custom issue messages.

    Keys are issue codes: ``required``, ``invalid_type``, ``enum``,
    ``too_small``, ``too_big``, ``pattern``, ``email``, ``url``, ``custom``.

    Example:
        ``a: str = Field(min_length=5, json_schema_extra=error_messages(required="a is required"))``

    Args:
        **messages (str): Message by issue code.

    Returns:
        dict[str, dict[str, str]]: Payload for `Field(json_schema_extra=...)`.
    """
    return {"messages": dict(messages)}


def describe_model(
    model: type[BaseModel],
    *,
    _seen: frozenset[type[BaseModel]] = frozenset(),
) -> dict[str, FieldTypeDescriptor]:
    """Describe every field of a pydantic model.

    Args:
        model (type[BaseModel]): Model class.
        _seen (frozenset[type[BaseModel]]): Models on the current recursion path.

    Returns:
        dict[str, FieldTypeDescriptor]: Descriptors in declaration order.
    """
    seen = _seen | {model}
    return {name: describe_field(info, _seen=seen) for name, info in model.model_fields.items()}


def describe_field(
    field_info: FieldInfo,
    *,
    _seen: frozenset[type[BaseModel]] = frozenset(),
) -> FieldTypeDescriptor:
    """Describe one pydantic field, wrapping optional and defaulted fields.

    Args:
        field_info (FieldInfo): Pydantic field info.
        _seen (frozenset[type[BaseModel]]): Models on the current recursion path.

    Returns:
        FieldTypeDescriptor: Field descriptor.
    """
    base = describe_annotation(field_info.annotation, field_info.metadata, _seen=_seen)
    messages = _field_messages(field_info.json_schema_extra)
    if field_info.is_required():
        return base.model_copy(update={"messages": messages}) if messages else base

    default = _field_default(field_info)
    kind = FieldKind.OPTIONAL if default is None else FieldKind.DEFAULT
    return FieldTypeDescriptor(kind=kind, inner=base, default=default, messages=messages)


def describe_annotation(
    annotation: Any,
    metadata: Sequence[Any] = (),
    *,
    _seen: frozenset[type[BaseModel]] = frozenset(),
) -> FieldTypeDescriptor:
    """Describe a type annotation and its constraint metadata.

    Args:
        annotation (Any): Type annotation.
        metadata (Sequence[Any]): Constraint objects (annotated-types, pydantic metadata).
        _seen (frozenset[type[BaseModel]]): Models on the current recursion path.

    Returns:
        FieldTypeDescriptor: Descriptor; `FieldKind.UNKNOWN` for unsupported types.
    """
    origin = get_origin(annotation)
    if origin is Annotated:
        base, *extra = get_args(annotation)
        return describe_annotation(base, [*metadata, *_flatten_metadata(extra)], _seen=_seen)

    if origin is Union or origin is UnionType:
        members = [arg for arg in get_args(annotation) if arg is not NoneType]
        if len(members) == 1:
            return describe_annotation(members[0], metadata, _seen=_seen)
        return _constrained(FieldTypeDescriptor(kind=FieldKind.UNKNOWN), metadata)

    if origin is Literal:
        values = [_enum_value(arg) for arg in get_args(annotation)]
        return FieldTypeDescriptor(kind=FieldKind.ENUM, enum_values=values)

    if origin in _ARRAY_ORIGINS or annotation in _ARRAY_ORIGINS:
        args = [arg for arg in get_args(annotation) if arg is not Ellipsis]
        inner = describe_annotation(args[0], _seen=_seen) if args else None
        return _constrained(FieldTypeDescriptor(kind=FieldKind.ARRAY, inner=inner), metadata)

    if not isclass(annotation):
        return _constrained(FieldTypeDescriptor(kind=FieldKind.UNKNOWN), metadata)
    return _constrained(_describe_class(annotation, _seen=_seen), metadata)


def _describe_class(annotation: type, *, _seen: frozenset[type[BaseModel]]) -> FieldTypeDescriptor:
    if issubclass(annotation, Enum):
        return FieldTypeDescriptor(
            kind=FieldKind.ENUM,
            enum_values=[_enum_value(member) for member in annotation],
        )
    if issubclass(annotation, bool):
        return FieldTypeDescriptor(kind=FieldKind.BOOLEAN)
    if issubclass(annotation, int | float | Decimal):
        return FieldTypeDescriptor(kind=FieldKind.NUMBER)
    if issubclass(annotation, datetime):
        return FieldTypeDescriptor(kind=FieldKind.DATE)
    if issubclass(annotation, date):
        return FieldTypeDescriptor(kind=FieldKind.DATE, date_only=True)
    if issubclass(annotation, EmailStr):
        return FieldTypeDescriptor(kind=FieldKind.STRING, format=FieldFormat.EMAIL)
    if issubclass(annotation, AnyUrl):
        return FieldTypeDescriptor(kind=FieldKind.STRING, format=FieldFormat.URL)
    if issubclass(annotation, str):
        return FieldTypeDescriptor(kind=FieldKind.STRING)
    if issubclass(annotation, BaseModel):
        fields = {} if annotation in _seen else describe_model(annotation, _seen=_seen)
        return FieldTypeDescriptor(kind=FieldKind.OBJECT, fields=fields)
    return FieldTypeDescriptor(kind=FieldKind.UNKNOWN)


def _flatten_metadata(items: Sequence[Any]) -> list[Any]:
    flattened: list[Any] = []
    for item in items:
        if isinstance(item, FieldInfo):
            flattened.extend(item.metadata)
        else:
            flattened.append(item)
    return flattened


def _constrained(descriptor: FieldTypeDescriptor, metadata: Sequence[Any]) -> FieldTypeDescriptor:
    updates: dict[str, Any] = {}
    for item in metadata:
        for attr, target in _CONSTRAINT_TARGETS.items():
            value = getattr(item, attr, None)
            if value is None:
                continue
            updates[target] = value.pattern if isinstance(value, re.Pattern) else value
    return descriptor.model_copy(update=updates) if updates else descriptor


def _enum_value(value: Any) -> str:
    return str(value.value if isinstance(value, Enum) else value)


def _field_messages(extra: Any) -> dict[str, str]:
    if not isinstance(extra, Mapping):
        return {}
    messages = extra.get("messages")
    if not isinstance(messages, Mapping):
        return {}
    return {str(code): str(message) for code, message in messages.items()}


def _field_default(field_info: FieldInfo) -> Any:
    try:
        return field_info.get_default(call_default_factory=True)
    except (TypeError, ValueError):
        # Factories that depend on validated data are applied by pydantic itself.
        return None


class PydanticSchema:
    """`FormSchema` backed by a pydantic model class."""

    def __init__(self, model: type[BaseModel], *, settings: Settings | None = None) -> None:
        """Describe the model once for later introspection.

        Args:
            model (type[BaseModel]): Pydantic model class.
            settings (Settings | None): Runtime settings.

        Raises:
            SchemaError: If `model` is not a pydantic model class.
        """
        if not (isclass(model) and issubclass(model, BaseModel)):
            raise SchemaError(message=f"Expected a pydantic model class, got {model!r}")
        self.model = model
        self._settings = settings or get_settings()
        self._descriptors = describe_model(model)

    @property
    def field_keys(self) -> tuple[str, ...]:
        """Return the declared top-level field keys."""
        return tuple(self._descriptors)

    @property
    def descriptors(self) -> Mapping[str, FieldTypeDescriptor]:
        """Return top-level descriptors by key."""
        return self._descriptors

    def introspect(self, key: str) -> FieldTypeDescriptor:
        """Return the descriptor of a top-level field.

        Args:
            key (str): Field key.

        Raises:
            UnknownFieldError: If the model does not declare `key`.

        Returns:
            FieldTypeDescriptor: Field descriptor.
        """
        try:
            return self._descriptors[key]
        except KeyError:
            raise UnknownFieldError(key=key, known_keys=self.field_keys) from None

    def validate(self, value: dict[str, Any]) -> SchemaResult:
        """Validate a coerced tree with the model.

        Raw strings left on number or boolean leaves are reported as type
        mismatches instead of going through pydantic's lax parsing.

        Args:
            value (dict[str, Any]): Coerced tree.

        Returns:
            SchemaResult: Accepted data (absent optional fields omitted) or issues.
        """
        mismatches = dict(_raw_scalar_leaves(value, self._descriptors, ()))
        try:
            instance = self.model.model_validate(value)
        except ValidationError as exc:
            issues = [self._to_issue(error) for error in exc.errors(include_url=False)]
        else:
            if not mismatches:
                return SchemaResult(success=True, data=_dump(instance))
            issues = []

        issues = [self._mismatch_issue(path, kind) for path, kind in mismatches.items()] + [
            issue for issue in issues if issue.path not in mismatches
        ]
        issues.sort(key=self._field_position)
        return SchemaResult(success=False, issues=issues)

    def _field_position(self, issue: SchemaIssue) -> int:
        keys = self.field_keys
        head = issue.path[0] if issue.path else None
        return keys.index(head) if head in keys else len(keys)

    def _mismatch_issue(self, path: tuple[str | int, ...], kind: FieldKind) -> SchemaIssue:
        _, messages = self._resolve(path)
        message = messages.get("invalid_type") or f"Expected {kind.to_str()}, received string"
        return SchemaIssue(path=path, message=message, code="invalid_type")

    def _to_issue(self, error: ErrorDetails) -> SchemaIssue:
        path = tuple(error["loc"])
        ctx = error.get("ctx") or {}
        cause = ctx.get("error")
        if isinstance(cause, RefinementError):
            path = (*path, *cause.path)

        descriptor, messages = self._resolve(path)
        code = _issue_code(error["type"], ctx, descriptor)
        message = messages.get(code) or self._default_message(code, error, descriptor)
        return SchemaIssue(path=path, message=message, code=code)

    def _resolve(self, path: tuple[str | int, ...]) -> tuple[FieldTypeDescriptor | None, dict[str, str]]:
        """Walk the descriptor tree along an issue path, merging custom messages."""
        messages: dict[str, str] = {}
        if not path or not isinstance(path[0], str):
            return None, messages

        descriptor = self._descriptors.get(path[0])
        remaining = path[1:]
        while descriptor is not None:
            messages.update(descriptor.messages)
            messages.update(descriptor.unwrap().messages)
            if not remaining:
                break
            descriptor = descriptor.child(remaining[0])
            remaining = remaining[1:]
        return descriptor, messages

    def _default_message(
        self,
        code: str,
        error: ErrorDetails,
        descriptor: FieldTypeDescriptor | None,
    ) -> str:
        ctx = error.get("ctx") or {}
        error_type = error["type"]
        leaf = descriptor.unwrap() if descriptor is not None else None
        if code == "required":
            return self._settings.required_message
        if code == "invalid_type":
            expected = _EXPECTED_KINDS.get(error_type.split("_", 1)[0], "value")
            return f"Expected {expected}, received {_kind_of(error.get('input'))}"
        if code == "enum":
            values = leaf.enum_values if leaf is not None and leaf.kind == FieldKind.ENUM else []
            if not values:
                return error["msg"]
            return "Invalid enum value. Expected " + " | ".join(f"'{value}'" for value in values)
        if code in {"too_small", "too_big"}:
            return _bound_message(error_type, ctx) or error["msg"]
        if code in _FORMAT_MESSAGES:
            return _FORMAT_MESSAGES[code]
        if code == "custom":
            cause = ctx.get("error")
            if isinstance(cause, RefinementError):
                return cause.message
            return str(cause) if cause is not None else error["msg"]
        if code == "int_from_float":
            return "Expected integer, received float"
        return error["msg"]


def _issue_code(error_type: str, ctx: Mapping[str, Any], descriptor: FieldTypeDescriptor | None) -> str:
    leaf = descriptor.unwrap() if descriptor is not None else None
    if error_type == "missing":
        return "required"
    if error_type in _TYPE_ERRORS:
        return "invalid_type"
    if error_type in {"enum", "literal_error"}:
        return "enum"
    if error_type in _TOO_SMALL:
        return "too_small"
    if error_type in _TOO_BIG:
        return "too_big"
    if error_type == "string_pattern_mismatch":
        return "pattern"
    if error_type.startswith("url_"):
        return "url"
    if error_type == "value_error" and "error" not in ctx and leaf is not None and leaf.format == FieldFormat.EMAIL:
        return "email"
    if error_type in {"value_error", "assertion_error"}:
        return "custom"
    return error_type


def _bound_message(error_type: str, ctx: Mapping[str, Any]) -> str | None:
    templates = {
        "string_too_short": ("min_length", "String must contain at least {} character(s)"),
        "string_too_long": ("max_length", "String must contain at most {} character(s)"),
        "too_short": ("min_length", "Array must contain at least {} element(s)"),
        "too_long": ("max_length", "Array must contain at most {} element(s)"),
        "greater_than_equal": ("ge", "Number must be greater than or equal to {}"),
        "greater_than": ("gt", "Number must be greater than {}"),
        "less_than_equal": ("le", "Number must be less than or equal to {}"),
        "less_than": ("lt", "Number must be less than {}"),
    }
    key, template = templates[error_type]
    if key not in ctx:
        return None
    return template.format(ctx[key])


def _kind_of(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float | Decimal):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, date):
        return "date"
    if isinstance(value, list | tuple | set | frozenset):
        return "array"
    if isinstance(value, Mapping | BaseModel):
        return "object"
    return type(value).__name__


def _raw_scalar_leaves(
    node: Mapping[str, Any],
    descriptors: Mapping[str, FieldTypeDescriptor],
    prefix: tuple[str | int, ...],
) -> Iterator[tuple[tuple[str | int, ...], FieldKind]]:
    """Yield paths of number or boolean leaves still holding a raw string."""
    for key, descriptor in descriptors.items():
        if key in node:
            yield from _raw_leaves_of(node[key], descriptor, (*prefix, key))


def _raw_leaves_of(
    value: Any,
    descriptor: FieldTypeDescriptor,
    path: tuple[str | int, ...],
) -> Iterator[tuple[tuple[str | int, ...], FieldKind]]:
    leaf = descriptor.unwrap()
    if leaf.kind in {FieldKind.NUMBER, FieldKind.BOOLEAN}:
        if isinstance(value, str):
            yield path, leaf.kind
    elif leaf.kind == FieldKind.ARRAY and leaf.inner is not None and isinstance(value, list):
        for index, item in enumerate(value):
            yield from _raw_leaves_of(item, leaf.inner, (*path, index))
    elif leaf.kind == FieldKind.OBJECT and isinstance(value, Mapping):
        yield from _raw_scalar_leaves(value, leaf.fields, path)


def _dump(instance: BaseModel) -> dict[str, Any]:
    """Dump submitted fields plus defaults pydantic computed for absent ones."""
    data = instance.model_dump(exclude_unset=True)
    unset = set(type(instance).model_fields) - instance.model_fields_set
    if unset:
        computed = instance.model_dump(include=unset)
        data.update({key: value for key, value in computed.items() if value is not None})
    return data


def as_form_schema(schema: Any, *, settings: Settings | None = None) -> FormSchema:
    """Adapt a schema argument to the `FormSchema` capability.

    Args:
        schema (Any): A pydantic model class or an object already implementing `FormSchema`.
        settings (Settings | None): Runtime settings for the pydantic adapter.

    Raises:
        SchemaError: If the schema cannot be adapted.

    Returns:
        FormSchema: Schema capability.
    """
    if isclass(schema) and issubclass(schema, BaseModel):
        return PydanticSchema(schema, settings=settings)
    if all(callable(getattr(schema, name, None)) for name in ("validate", "introspect")) and hasattr(
        schema,
        "field_keys",
    ):
        return schema
    raise SchemaError(message=f"Unsupported schema: {schema!r}")
