"""Shared fakes for collector tests."""

from typing import Any, Dict, List, Optional

import pytest

from euem_metrics.acquisition.provider import (
    InstrumentationProvider,
    ProviderSession,
    QueryResult,
    ResultItem,
)
from euem_metrics.errors import (
    FieldReadError,
    IdentifierSourceError,
    ItemFetchError,
    ProviderConnectionError,
    QueryError,
)
from euem_metrics.identifiers import IdentifierSource
from euem_metrics.variant import Variant


class FakeItem(ResultItem):
    def __init__(self, provider, label, row):
        self.provider = provider
        self.label = label
        self.row = row
        provider.opened.append(label)

    def get(self, name):
        if name not in self.row:
            raise FieldReadError(f"cannot read {name}")
        value = self.row[name]
        # an exception stored in the row is raised by the read
        if isinstance(value, Exception):
            raise value
        return Variant.of(value)

    def close(self):
        self.provider.closed.append(self.label)


class FakeResult(QueryResult):
    def __init__(self, provider, rows):
        self.provider = provider
        self.rows = rows
        provider.opened.append("result")

    def count(self):
        if self.provider.fail_count:
            raise QueryError("count unavailable")
        return len(self.rows)

    def item(self, index):
        if index == self.provider.fail_item_at:
            raise ItemFetchError(f"item {index} unavailable")
        return FakeItem(self.provider, f"item-{index}", self.rows[index])

    def close(self):
        self.provider.closed.append("result")


class FakeSession(ProviderSession):
    def __init__(self, provider):
        self.provider = provider
        provider.opened.append("session")

    def exec_query(self, query):
        self.provider.queries.append(query)
        if self.provider.fail_query:
            raise QueryError("query failed")
        return FakeResult(self.provider, self.provider.rows)

    def close(self):
        self.provider.closed.append("session")


class FakeProvider(InstrumentationProvider):
    """In-memory provider recording every handle it opens and closes."""

    def __init__(
        self,
        rows: Optional[List[Dict[str, Any]]] = None,
        fail_connect: bool = False,
        fail_query: bool = False,
        fail_count: bool = False,
        fail_item_at: Optional[int] = None,
    ):
        self.rows = rows or []
        self.fail_connect = fail_connect
        self.fail_query = fail_query
        self.fail_count = fail_count
        self.fail_item_at = fail_item_at
        self.namespaces: List[str] = []
        self.queries: List[str] = []
        self.opened: List[str] = []
        self.closed: List[str] = []

    def connect(self, namespace):
        self.namespaces.append(namespace)
        if self.fail_connect:
            raise ProviderConnectionError("provider unreachable")
        return FakeSession(self)


class FakeIdentifierSource(IdentifierSource):
    def __init__(self, mapping=None, fail=False):
        self.mapping = mapping or {}
        self.fail = fail
        self.calls = 0

    def get_session_guids(self):
        self.calls += 1
        if self.fail:
            raise IdentifierSourceError("registry unavailable")
        return dict(self.mapping)


@pytest.fixture
def full_row():
    """A provider row with every property at a representative non-zero value."""
    return {
        "AvgBeaconLatency": 12.5,
        "AvgPrivilegedTime": 1.5,
        "AvgProcessorTime": 9.75,
        "AvgThroughputBytesRcvd": 1024.0,
        "AvgThroughputBytesSent": 2048.5,
        "AvgUserTime": 8.25,
        "City": "Berlin",
        "ClientTimestamp": "1700000000",
        "Country": "Germany",
        "EndpointIP": "10.0.0.15",
        "GpuAvgUsage": 3.25,
        "GpuMaxUsage": 40,
        "ISP": "Example Telecom",
        "LatencyUnit": "ms",
        "LinkSpeed": 1000,
        "MaxPrivilegedTime": 7,
        "MaxProcessorTime": 55,
        "MaxThroughputBytesRcvd": "4096",
        "MaxThroughputBytesSent": "8192",
        "MaxUserTime": 48,
        "NetworkInterfaceType": "Ethernet",
        "RamAvgUsage": 61.5,
        "RamMaxUsage": 75,
        "SessionID": 5,
        "SignalStrength": 0,
        "SpeedUnit": "Mbps",
        "Timestamp": "20240101120000.000000+000",
    }


@pytest.fixture
def fake_provider_factory():
    return FakeProvider


@pytest.fixture
def fake_identifier_source_factory():
    return FakeIdentifierSource
