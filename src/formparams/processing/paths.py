"""Flat key/value entries to nested raw trees."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl

from formparams.logging import get_logger

logger = get_logger(__name__)

APPEND = "[]"
"""Path segment marking "append to the array at this path"."""

_SEGMENT_PATTERN = re.compile(r"\[([^\]]*)\]|\.?([^.\[\]]+)")

PathSegment = str | int
RawTree = dict[PathSegment, Any]


@dataclass
class RawValues:
    """Candidate values collected for one leaf path."""

    values: list[Any] = field(default_factory=list)
    explicit_array: bool = False


def parse_path(path: str) -> list[PathSegment]:
    """Split a dotted/bracketed path into segments.

    ``items[0].title`` gives ``["items", 0, "title"]``, ``tags[]`` gives
    ``["tags", APPEND]``.

    Args:
        path (str): Raw entry key.

    Returns:
        list[PathSegment]: Property names, integer indices and `APPEND` markers.
    """
    segments: list[PathSegment] = []
    for bracketed, named in _SEGMENT_PATTERN.findall(path):
        if named:
            segments.append(named)
        elif bracketed == "":
            segments.append(APPEND)
        elif bracketed.isdigit():
            segments.append(int(bracketed))
        else:
            segments.append(bracketed)
    return segments


def iter_entries(source: Any) -> Iterator[tuple[str, Any]]:
    """Yield (key, value) pairs from any supported input container.

    Supported sources are query strings, containers exposing
    ``multi_items()`` (httpx and starlette), containers exposing ``lists()``
    (werkzeug-style multidicts), plain mappings and iterables of pairs.

    Args:
        source (Any): Input container.

    Yields:
        tuple[str, Any]: Entries in encounter order.
    """
    if source is None:
        return
    if isinstance(source, str):
        yield from parse_qsl(source.removeprefix("?"), keep_blank_values=True)
        return
    multi_items = getattr(source, "multi_items", None)
    if callable(multi_items):
        yield from multi_items()
        return
    lists = getattr(source, "lists", None)
    if callable(lists):
        for key, values in lists():
            for value in values:
                yield key, value
        return
    if isinstance(source, Mapping):
        yield from _iter_mapping(source, prefix="")
        return
    for key, value in source:
        yield key, value


def _iter_mapping(source: Mapping[str, Any], prefix: str) -> Iterator[tuple[str, Any]]:
    for key, value in source.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            yield from _iter_mapping(value, prefix=path)
        elif isinstance(value, list | tuple):
            for item in value:
                yield path, item
        else:
            yield path, value


def decode_entries(
    entries: Iterable[tuple[str, Any]],
    field_keys: Iterable[str] | None = None,
) -> RawTree:
    """Build a nested raw tree from flat entries.

    Leaves are `RawValues` holding every value seen for the path. Repeated
    keys are all kept here; the coercion step decides whether a leaf is an
    array or a scalar.

    Args:
        entries (Iterable[tuple[str, Any]]): Flat entries.
        field_keys (Iterable[str] | None): Declared top-level keys; entries
            outside this set are dropped. ``None`` keeps everything.

    Returns:
        RawTree: Nested mapping keyed by path segments.
    """
    allowed = set(field_keys) if field_keys is not None else None
    tree: RawTree = {}
    for key, value in entries:
        segments = parse_path(key)
        if not segments or isinstance(segments[0], int) or segments[0] == APPEND:
            logger.debug("Skipped malformed parameter path", extra={"key": key})
            continue
        if allowed is not None and segments[0] not in allowed:
            logger.debug("Dropped parameter outside schema", extra={"key": key})
            continue
        if not _insert(tree, segments, value):
            logger.debug("Skipped conflicting parameter path", extra={"key": key})
    return tree


def _insert(tree: RawTree, segments: list[PathSegment], value: Any) -> bool:
    explicit_array = segments[-1] == APPEND
    if explicit_array:
        segments = segments[:-1]
    if APPEND in segments:
        return False

    node = tree
    for segment in segments[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            return False
        node = child

    leaf = node.setdefault(segments[-1], RawValues())
    if not isinstance(leaf, RawValues):
        return False
    leaf.values.append(value)
    leaf.explicit_array = leaf.explicit_array or explicit_array
    return True
