"""Acquisition of endpoint metrics from instrumentation providers."""

from .pipeline import DEFAULT_CLASS_NAME, DEFAULT_NAMESPACE, acquire_endpoint_metrics, build_metric
from .provider import InstrumentationProvider, ProviderSession, QueryResult, ResultItem
from .snapshot_provider import SnapshotProvider
from .wmi_provider import WmiProvider

__all__ = [
    "DEFAULT_CLASS_NAME",
    "DEFAULT_NAMESPACE",
    "InstrumentationProvider",
    "ProviderSession",
    "QueryResult",
    "ResultItem",
    "SnapshotProvider",
    "WmiProvider",
    "acquire_endpoint_metrics",
    "build_metric",
]
