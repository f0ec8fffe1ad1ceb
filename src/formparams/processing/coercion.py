"""Descriptor-driven coercion of raw trees into typed values."""

from __future__ import annotations

import copy
import math
import re
from datetime import UTC, date, datetime, time
from typing import TYPE_CHECKING, Any, Final

from formparams.processing.paths import RawValues
from formparams.typing.enums import FieldKind, RepeatedKeyPolicy

if TYPE_CHECKING:
    from collections.abc import Mapping

    from formparams.processing.paths import RawTree
    from formparams.typing.models import FieldTypeDescriptor


class _Absent:
    """Marker for a value that must be treated as not submitted."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent()

_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def coerce_tree(
    tree: RawTree,
    descriptors: Mapping[str, FieldTypeDescriptor],
    *,
    policy: RepeatedKeyPolicy = RepeatedKeyPolicy.FIRST,
) -> dict[str, Any]:
    """Coerce a raw tree against an object's field descriptors.

    Keys without a descriptor are dropped; keys whose value normalizes to
    absent are omitted so the schema applies its own required/optional rules.

    Args:
        tree (RawTree): Tree produced by `decode_entries`.
        descriptors (Mapping[str, FieldTypeDescriptor]): Field descriptors by key.
        policy (RepeatedKeyPolicy): Occurrence kept for repeated scalar keys.

    Returns:
        dict[str, Any]: Coerced tree.
    """
    coerced: dict[str, Any] = {}
    for key, descriptor in descriptors.items():
        value = coerce_node(tree.get(key), descriptor, policy=policy)
        if value is not ABSENT:
            coerced[key] = value
    return coerced


def coerce_node(
    node: Any,
    descriptor: FieldTypeDescriptor,
    *,
    policy: RepeatedKeyPolicy = RepeatedKeyPolicy.FIRST,
) -> Any:
    """Coerce one raw tree node.

    Args:
        node (Any): `RawValues`, nested raw mapping or ``None`` when not submitted.
        descriptor (FieldTypeDescriptor): Descriptor for the node.
        policy (RepeatedKeyPolicy): Occurrence kept for repeated scalar keys.

    Returns:
        Any: Typed value, a raw value left for the validator, or `ABSENT`.
    """
    if descriptor.kind in {FieldKind.OPTIONAL, FieldKind.DEFAULT}:
        value = ABSENT if descriptor.inner is None else coerce_node(node, descriptor.inner, policy=policy)
        if value is ABSENT and descriptor.kind == FieldKind.DEFAULT:
            return copy.deepcopy(descriptor.default)
        return value

    if node is None:
        return ABSENT
    if descriptor.kind == FieldKind.ARRAY:
        return _coerce_array(node, descriptor, policy=policy)
    if descriptor.kind == FieldKind.OBJECT:
        if isinstance(node, dict):
            return coerce_tree(node, descriptor.fields, policy=policy)
        return _raw(node, policy=policy)

    if isinstance(node, RawValues):
        if node.explicit_array:
            return list(node.values)
        raw = node.values[0] if policy == RepeatedKeyPolicy.FIRST else node.values[-1]
        return coerce_scalar(raw, descriptor)
    return _raw(node, policy=policy)


def coerce_scalar(raw: Any, descriptor: FieldTypeDescriptor) -> Any:
    """Coerce one raw leaf value by descriptor kind.

    Empty strings become `ABSENT`. Values that cannot be converted are
    returned unchanged so the validator reports the type mismatch.

    Args:
        raw (Any): Raw submitted value.
        descriptor (FieldTypeDescriptor): Leaf descriptor (wrappers already removed).

    Returns:
        Any: Coerced value.
    """
    if not isinstance(raw, str):
        return raw
    if raw == "":
        return ABSENT

    kind = descriptor.kind
    if kind == FieldKind.NUMBER:
        return _parse_number(raw)
    if kind == FieldKind.BOOLEAN:
        return True if raw == "true" else raw
    if kind == FieldKind.DATE:
        return _parse_date(raw, date_only=descriptor.date_only)
    return raw


def _coerce_array(node: Any, descriptor: FieldTypeDescriptor, *, policy: RepeatedKeyPolicy) -> Any:
    inner = descriptor.inner
    if isinstance(node, RawValues):
        items: list[Any] = [RawValues(values=[value]) for value in node.values]
    elif isinstance(node, dict) and node and all(isinstance(key, int) for key in node):
        items = [node[index] for index in sorted(node)]
    else:
        return _raw(node, policy=policy)

    if inner is None:
        values = [_raw(item, policy=policy) for item in items]
    else:
        values = [coerce_node(item, inner, policy=policy) for item in items]
    values = [value for value in values if value is not ABSENT]
    return values or ABSENT


def _raw(node: Any, *, policy: RepeatedKeyPolicy) -> Any:
    """Flatten a raw node without type information."""
    if isinstance(node, RawValues):
        if node.explicit_array:
            return list(node.values)
        return node.values[0] if policy == RepeatedKeyPolicy.FIRST else node.values[-1]
    if isinstance(node, dict):
        return {key: _raw(value, policy=policy) for key, value in node.items()}
    return node


def _parse_number(raw: str) -> int | float | str:
    text = raw.strip()
    if not _NUMBER_PATTERN.match(text):
        return raw
    if _INTEGER_PATTERN.match(text):
        return int(text)
    number = float(text)
    if not math.isfinite(number):
        return raw
    return number


def _parse_date(raw: str, *, date_only: bool) -> date | datetime | str:
    text = raw.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return raw
    if date_only:
        return parsed.date() if parsed.time() == time.min else raw
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
