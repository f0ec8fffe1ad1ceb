"""Decoding and coercion helpers."""

from formparams.processing.coercion import ABSENT, coerce_node, coerce_scalar, coerce_tree
from formparams.processing.paths import APPEND, RawValues, decode_entries, iter_entries, parse_path

__all__ = [
    "ABSENT",
    "APPEND",
    "RawValues",
    "coerce_node",
    "coerce_scalar",
    "coerce_tree",
    "decode_entries",
    "iter_entries",
    "parse_path",
]
