"""Variant classification and coercion."""

from .coercion import to_float64, to_int64, to_text, to_timestamp, to_uint64
from .models import Variant, VariantKind

__all__ = [
    "Variant",
    "VariantKind",
    "to_uint64",
    "to_int64",
    "to_float64",
    "to_text",
    "to_timestamp",
]
