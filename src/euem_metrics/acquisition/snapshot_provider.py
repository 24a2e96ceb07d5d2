"""Provider that replays rows from a YAML or JSON snapshot file.

Snapshot layout::

    Citrix_Euem_EndpointMetrics:
      - SessionID: 5
        AvgBeaconLatency: 12.5
        LinkSpeed: {kind: uint32, value: 1000}

A property given as ``{kind, value}`` is replayed with that fixed-width
representation; plain values are classified from their YAML type.
"""

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..errors import FieldReadError, ItemFetchError, ProviderConnectionError, QueryError
from ..variant import Variant, VariantKind
from ..variant.models import FLOAT_KINDS, INTEGER_KINDS, KIND_DTYPES, fits_kind
from .provider import InstrumentationProvider, ProviderSession, QueryResult, ResultItem

logger = logging.getLogger(__name__)

_SELECT_ALL = re.compile(r"\s*SELECT\s+\*\s+FROM\s+(\w+)\s*", re.IGNORECASE)


def _typed_variant(name: str, typed: Dict[str, Any]) -> Variant:
    try:
        kind = VariantKind(typed["kind"])
    except (KeyError, ValueError) as exc:
        raise FieldReadError(f"Invalid kind for property {name}: {typed.get('kind')!r}") from exc

    value = typed.get("value")
    if value is None or kind is VariantKind.NULL:
        return Variant.null()
    if kind in INTEGER_KINDS:
        if isinstance(value, int) and not isinstance(value, bool) and fits_kind(kind, value):
            return Variant(kind, value)
        raise FieldReadError(f"Value {value!r} does not fit {kind.value} for {name}")
    if kind in FLOAT_KINDS:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            # round through the declared width, as the provider would have
            return Variant(kind, float(KIND_DTYPES[kind](value)))
        raise FieldReadError(f"Value {value!r} is not a {kind.value} for {name}")
    if kind is VariantKind.TEXT and not isinstance(value, str):
        raise FieldReadError(f"Value {value!r} is not text for {name}")
    if kind is VariantKind.DATETIME and not isinstance(value, datetime):
        raise FieldReadError(f"Value {value!r} is not a datetime for {name}")
    return Variant(kind, value)


class SnapshotResultItem(ResultItem):
    """One row of a snapshot."""

    def __init__(self, row: Dict[str, Any]):
        self._row = row

    def get(self, name: str) -> Variant:
        if self._row is None:
            raise FieldReadError(f"Item already released, cannot read {name}")
        if name not in self._row:
            raise FieldReadError(f"Property {name} not present in snapshot row")
        raw = self._row[name]
        if isinstance(raw, dict) and "kind" in raw:
            return _typed_variant(name, raw)
        return Variant.of(raw)

    def close(self) -> None:
        self._row = None


class SnapshotQueryResult(QueryResult):
    def __init__(self, rows: List[Any]):
        self._rows = rows

    def count(self) -> int:
        if self._rows is None:
            raise QueryError("Result set already released")
        return len(self._rows)

    def item(self, index: int) -> SnapshotResultItem:
        if self._rows is None or not 0 <= index < len(self._rows):
            raise ItemFetchError(f"Failed to get result item {index}")
        row = self._rows[index]
        if not isinstance(row, dict):
            raise ItemFetchError(f"Result item {index} is not a property mapping")
        return SnapshotResultItem(row)

    def close(self) -> None:
        self._rows = None


class SnapshotSession(ProviderSession):
    def __init__(self, classes: Dict[str, Any]):
        self._classes = classes

    def exec_query(self, query: str) -> SnapshotQueryResult:
        match = _SELECT_ALL.fullmatch(query)
        if match is None:
            raise QueryError(f"Unsupported snapshot query: {query}")
        rows = self._classes.get(match.group(1)) or []
        if not isinstance(rows, list):
            raise QueryError(f"Snapshot class {match.group(1)} is not a list of rows")
        return SnapshotQueryResult(list(rows))

    def close(self) -> None:
        self._classes = None


class SnapshotProvider(InstrumentationProvider):
    """Serves query results from a recorded snapshot file."""

    def __init__(self, snapshot_path: Optional[str] = None):
        self.snapshot_path = snapshot_path

    @classmethod
    def from_config(cls, provider_config) -> "SnapshotProvider":
        return cls(provider_config.snapshot_path)

    def connect(self, namespace: str) -> SnapshotSession:
        if not self.snapshot_path:
            raise ProviderConnectionError("No snapshot file configured")

        path = Path(self.snapshot_path)
        try:
            with open(path, "r") as f:
                if path.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ProviderConnectionError(f"Failed to open snapshot {path}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ProviderConnectionError(f"Snapshot {path} must map class names to rows")

        logger.info(f"Loaded snapshot {path} for namespace {namespace}")
        return SnapshotSession(data)
