"""Fail-soft conversion of provider variants into typed metric values.

Every conversion returns a usable value and never raises. Anything that
cannot be represented exactly in the destination (negative to unsigned,
out-of-range, non-finite, unparseable text, unknown representation)
becomes zero rather than a wrapped or truncated bit pattern.
"""

import logging
import math
import re
from datetime import datetime
from typing import Any, Optional

from .models import (
    FLOAT_KINDS,
    INT64_MAX,
    INT64_MIN,
    SIGNED_KINDS,
    UINT64_MAX,
    UNSIGNED_KINDS,
    Variant,
    VariantKind,
)

logger = logging.getLogger(__name__)

_UNSIGNED_TEXT = re.compile(r"[0-9]+")
_SIGNED_TEXT = re.compile(r"[+-]?[0-9]+")
_DECIMAL_TEXT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIAL_FLOAT_TEXT = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)


def _as_variant(value: Any) -> Variant:
    return value if isinstance(value, Variant) else Variant.of(value)


def _truncate_float(value: float, low: int, high: int) -> int:
    """Truncate toward zero, or 0 when the result falls outside [low, high]."""
    if not math.isfinite(value):
        return 0
    truncated = int(value)
    if truncated < low or truncated > high:
        return 0
    return truncated


def to_uint64(value: Any) -> int:
    """Convert a variant to an unsigned 64-bit integer.

    Negative numbers map to 0, never to their two's-complement pattern.
    Text must be plain ASCII decimal digits.
    """
    variant = _as_variant(value)
    kind = variant.kind

    if kind is VariantKind.NULL:
        return 0
    if kind in UNSIGNED_KINDS:
        return variant.value
    if kind in SIGNED_KINDS:
        return variant.value if variant.value >= 0 else 0
    if kind in FLOAT_KINDS:
        if variant.value >= 0:
            return _truncate_float(variant.value, 0, UINT64_MAX)
        return 0
    if kind is VariantKind.TEXT and isinstance(variant.value, str):
        if _UNSIGNED_TEXT.fullmatch(variant.value):
            parsed = int(variant.value)
            if parsed <= UINT64_MAX:
                return parsed
        logger.debug(f"Cannot parse {variant.value!r} as unsigned integer")
        return 0
    return 0


def to_int64(value: Any) -> int:
    """Convert a variant to a signed 64-bit integer.

    Unsigned values above the signed maximum map to 0 rather than wrapping.
    """
    variant = _as_variant(value)
    kind = variant.kind

    if kind is VariantKind.NULL:
        return 0
    if kind in SIGNED_KINDS:
        return variant.value
    if kind in UNSIGNED_KINDS:
        return variant.value if variant.value <= INT64_MAX else 0
    if kind in FLOAT_KINDS:
        return _truncate_float(variant.value, INT64_MIN, INT64_MAX)
    if kind is VariantKind.TEXT and isinstance(variant.value, str):
        if _SIGNED_TEXT.fullmatch(variant.value):
            parsed = int(variant.value)
            if INT64_MIN <= parsed <= INT64_MAX:
                return parsed
        logger.debug(f"Cannot parse {variant.value!r} as signed integer")
        return 0
    return 0


def to_float64(value: Any) -> float:
    """Convert a variant to a 64-bit float by numeric value."""
    variant = _as_variant(value)
    kind = variant.kind

    if kind is VariantKind.NULL:
        return 0.0
    if kind in FLOAT_KINDS or kind in SIGNED_KINDS or kind in UNSIGNED_KINDS:
        return float(variant.value)
    if kind is VariantKind.TEXT and isinstance(variant.value, str):
        text = variant.value
        if _SPECIAL_FLOAT_TEXT.fullmatch(text):
            return float(text)
        if _DECIMAL_TEXT.fullmatch(text):
            parsed = float(text)
            # overflow to infinity is a range failure
            if math.isfinite(parsed):
                return parsed
        logger.debug(f"Cannot parse {text!r} as float")
        return 0.0
    return 0.0


def to_text(value: Any) -> str:
    """Convert a variant to text; null becomes the empty string."""
    variant = _as_variant(value)
    if variant.kind is VariantKind.NULL:
        return ""
    if variant.kind is VariantKind.TEXT and isinstance(variant.value, str):
        return variant.value
    return str(variant.value)


def to_timestamp(value: Any) -> Optional[datetime]:
    """Accept only values that already are a point in time."""
    variant = _as_variant(value)
    if variant.kind is VariantKind.DATETIME and isinstance(variant.value, datetime):
        return variant.value
    return None
