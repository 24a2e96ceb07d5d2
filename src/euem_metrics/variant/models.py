"""Tagged representation of dynamically-typed provider values."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np


class VariantKind(Enum):
    """Concrete representations a provider value may arrive in."""

    NULL = "null"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    TEXT = "text"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"


SIGNED_KINDS = frozenset({
    VariantKind.INT8, VariantKind.INT16, VariantKind.INT32, VariantKind.INT64,
})
UNSIGNED_KINDS = frozenset({
    VariantKind.UINT8, VariantKind.UINT16, VariantKind.UINT32, VariantKind.UINT64,
})
FLOAT_KINDS = frozenset({VariantKind.FLOAT32, VariantKind.FLOAT64})
INTEGER_KINDS = SIGNED_KINDS | UNSIGNED_KINDS

# numpy dtype backing each fixed-width kind
KIND_DTYPES: Dict[VariantKind, Any] = {
    VariantKind.INT8: np.int8,
    VariantKind.INT16: np.int16,
    VariantKind.INT32: np.int32,
    VariantKind.INT64: np.int64,
    VariantKind.UINT8: np.uint8,
    VariantKind.UINT16: np.uint16,
    VariantKind.UINT32: np.uint32,
    VariantKind.UINT64: np.uint64,
    VariantKind.FLOAT32: np.float32,
    VariantKind.FLOAT64: np.float64,
}

# keyed by (kind code, itemsize) so platform aliases such as intc resolve too
_DTYPE_KINDS: Dict[Tuple[str, int], VariantKind] = {
    (np.dtype(dtype).kind, np.dtype(dtype).itemsize): kind for kind, dtype in KIND_DTYPES.items()
}

INT64_MIN = int(np.iinfo(np.int64).min)
INT64_MAX = int(np.iinfo(np.int64).max)
UINT64_MAX = int(np.iinfo(np.uint64).max)

# WMI CIM type codes (wbemCimtype* constants) as reported by SWbemProperty.CIMType
CIM_SINT8 = 16
CIM_UINT8 = 17
CIM_SINT16 = 2
CIM_UINT16 = 18
CIM_SINT32 = 3
CIM_UINT32 = 19
CIM_SINT64 = 20
CIM_UINT64 = 21
CIM_REAL32 = 4
CIM_REAL64 = 5
CIM_BOOLEAN = 11
CIM_STRING = 8
CIM_DATETIME = 101

CIM_TYPE_KINDS: Dict[int, VariantKind] = {
    CIM_SINT8: VariantKind.INT8,
    CIM_UINT8: VariantKind.UINT8,
    CIM_SINT16: VariantKind.INT16,
    CIM_UINT16: VariantKind.UINT16,
    CIM_SINT32: VariantKind.INT32,
    CIM_UINT32: VariantKind.UINT32,
    CIM_SINT64: VariantKind.INT64,
    CIM_UINT64: VariantKind.UINT64,
    CIM_REAL32: VariantKind.FLOAT32,
    CIM_REAL64: VariantKind.FLOAT64,
    CIM_BOOLEAN: VariantKind.BOOLEAN,
    CIM_STRING: VariantKind.TEXT,
    CIM_DATETIME: VariantKind.DATETIME,
}


def fits_kind(kind: VariantKind, value: int) -> bool:
    """Check whether an integer is representable in a fixed-width integer kind."""
    info = np.iinfo(KIND_DTYPES[kind])
    return int(info.min) <= value <= int(info.max)


@dataclass(frozen=True)
class Variant:
    """A provider value together with the representation it arrived in.

    Values are stored as native Python objects (``int``, ``float``, ``str``,
    ``datetime`` or ``None``); ``kind`` keeps the width and signedness the
    source reported so that coercion can be decided without inspecting the
    value's Python type again.
    """

    kind: VariantKind
    value: Any = None

    @classmethod
    def null(cls) -> "Variant":
        return cls(VariantKind.NULL, None)

    @classmethod
    def of(cls, raw: Any) -> "Variant":
        """Classify a raw Python or numpy value."""
        if isinstance(raw, Variant):
            return raw
        if raw is None:
            return cls.null()
        if isinstance(raw, (bool, np.bool_)):
            return cls(VariantKind.BOOLEAN, bool(raw))
        if isinstance(raw, np.generic):
            kind = _DTYPE_KINDS.get((raw.dtype.kind, raw.dtype.itemsize))
            if kind is not None:
                return cls(kind, raw.item())
        if isinstance(raw, int):
            value = int(raw)
            if INT64_MIN <= value <= INT64_MAX:
                return cls(VariantKind.INT64, value)
            if INT64_MAX < value <= UINT64_MAX:
                return cls(VariantKind.UINT64, value)
            return cls(VariantKind.UNKNOWN, value)
        if isinstance(raw, float):
            return cls(VariantKind.FLOAT64, float(raw))
        if isinstance(raw, str):
            return cls(VariantKind.TEXT, str(raw))
        if isinstance(raw, datetime):
            return cls(VariantKind.DATETIME, raw)
        return cls(VariantKind.UNKNOWN, raw)

    @classmethod
    def from_cim(cls, cim_type: Optional[int], raw: Any) -> "Variant":
        """Classify a value using the CIM type the provider reported for it.

        The WMI scripting interface hands 64-bit integers and datetimes over
        as strings; those stay TEXT and are parsed by the coercion engine.
        A CIM type that disagrees with the value falls back to ``of``.
        """
        if raw is None:
            return cls.null()
        if isinstance(raw, str):
            return cls(VariantKind.TEXT, raw)
        kind = CIM_TYPE_KINDS.get(cim_type) if cim_type is not None else None
        if kind in INTEGER_KINDS and isinstance(raw, int) and not isinstance(raw, bool):
            if fits_kind(kind, int(raw)):
                return cls(kind, int(raw))
        elif kind in FLOAT_KINDS and isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return cls(kind, float(raw))
        elif kind is VariantKind.BOOLEAN and isinstance(raw, bool):
            return cls(kind, raw)
        return cls.of(raw)

    @property
    def is_null(self) -> bool:
        return self.kind is VariantKind.NULL
