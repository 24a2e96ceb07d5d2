"""
Unit tests for the WMI provider using fake COM modules.
"""

import sys
from types import SimpleNamespace

import pytest

from euem_metrics.acquisition import DEFAULT_NAMESPACE, WmiProvider, acquire_endpoint_metrics
from euem_metrics.acquisition import wmi_provider
from euem_metrics.errors import FieldReadError, ItemFetchError, ProviderConnectionError, QueryError
from euem_metrics.variant import Variant, VariantKind
from euem_metrics.variant.models import CIM_REAL64, CIM_SINT32, CIM_STRING, CIM_UINT32, CIM_UINT64


class FakeComError(Exception):
    """Stands in for pywintypes.com_error."""


class MockPythoncom:
    """Records COM apartment initialization."""

    COINIT_MULTITHREADED = 0

    def __init__(self, fail_init=False):
        self.fail_init = fail_init
        self.initialized = 0
        self.uninitialized = 0

    def CoInitializeEx(self, flags):
        if self.fail_init:
            raise FakeComError("CoInitializeEx failed")
        self.initialized += 1

    def CoUninitialize(self):
        self.uninitialized += 1


class MockProperties:
    def __init__(self, properties):
        self._properties = properties

    def Item(self, name):
        if name not in self._properties:
            raise FakeComError(f"Not found: {name}")
        cim_type, value = self._properties[name]
        return SimpleNamespace(CIMType=cim_type, Value=value)


class MockObjectSet:
    def __init__(self, rows, fail_item_at=None):
        self._rows = rows
        self._fail_item_at = fail_item_at

    @property
    def Count(self):
        return len(self._rows)

    def ItemIndex(self, index):
        if index == self._fail_item_at:
            raise FakeComError(f"Generic failure at {index}")
        return SimpleNamespace(Properties_=MockProperties(self._rows[index]))


class MockService:
    def __init__(self, object_set, fail_query=False):
        self._object_set = object_set
        self.fail_query = fail_query
        self.queries = []

    def ExecQuery(self, query):
        self.queries.append(query)
        if self.fail_query:
            raise FakeComError("Invalid query")
        return self._object_set


class MockLocator:
    def __init__(self, service, fail_connect=False):
        self._service = service
        self.fail_connect = fail_connect
        self.connections = []

    def ConnectServer(self, computer, namespace):
        self.connections.append((computer, namespace))
        if self.fail_connect:
            raise FakeComError("Invalid namespace")
        return self._service


@pytest.fixture
def fake_com(monkeypatch):
    """Install fake pywin32 modules and return them for inspection."""

    def install(rows=None, fail_init=False, fail_connect=False, fail_query=False, fail_item_at=None):
        pythoncom = MockPythoncom(fail_init=fail_init)
        service = MockService(MockObjectSet(rows or [], fail_item_at), fail_query=fail_query)
        locator = MockLocator(service, fail_connect=fail_connect)
        client = SimpleNamespace(Dispatch=lambda prog_id: locator)
        pywintypes = SimpleNamespace(com_error=FakeComError)
        monkeypatch.setattr(wmi_provider, "_import_com", lambda: (pythoncom, pywintypes, client))
        return SimpleNamespace(pythoncom=pythoncom, service=service, locator=locator)

    return install


class TestWmiProviderConnection:
    """Test COM apartment handling around the WMI connection."""

    def test_success_balances_com_calls(self, fake_com):
        com = fake_com(rows=[{"SessionID": (CIM_SINT32, 5)}])

        records = acquire_endpoint_metrics(WmiProvider())

        assert len(records) == 1
        assert com.locator.connections == [(".", DEFAULT_NAMESPACE)]
        assert com.service.queries == ["SELECT * FROM Citrix_Euem_EndpointMetrics"]
        assert com.pythoncom.initialized == 1
        assert com.pythoncom.uninitialized == 1

    def test_connect_failure_uninitializes(self, fake_com):
        """Test that a failed ConnectServer still leaves the apartment."""
        com = fake_com(fail_connect=True)

        with pytest.raises(ProviderConnectionError):
            acquire_endpoint_metrics(WmiProvider(computer="remote-host"))

        assert com.locator.connections == [("remote-host", DEFAULT_NAMESPACE)]
        assert com.pythoncom.initialized == 1
        assert com.pythoncom.uninitialized == 1

    def test_init_failure(self, fake_com):
        com = fake_com(fail_init=True)

        with pytest.raises(ProviderConnectionError):
            WmiProvider().connect(DEFAULT_NAMESPACE)

        assert com.pythoncom.uninitialized == 0
        assert com.locator.connections == []

    def test_session_close_is_idempotent(self, fake_com):
        com = fake_com()

        session = WmiProvider().connect(DEFAULT_NAMESPACE)
        session.close()
        session.close()

        assert com.pythoncom.uninitialized == 1

    def test_missing_pywin32(self, monkeypatch):
        """Test that running without pywin32 is a connection failure."""
        monkeypatch.setitem(sys.modules, "pythoncom", None)

        with pytest.raises(ProviderConnectionError):
            WmiProvider().connect(DEFAULT_NAMESPACE)


class TestWmiProviderErrors:
    """Test translation of COM errors into acquisition errors."""

    def test_query_failure(self, fake_com):
        com = fake_com(fail_query=True)

        with pytest.raises(QueryError):
            acquire_endpoint_metrics(WmiProvider())

        assert com.pythoncom.uninitialized == 1

    def test_item_failure(self, fake_com):
        com = fake_com(rows=[{}, {}], fail_item_at=1)

        with pytest.raises(ItemFetchError):
            acquire_endpoint_metrics(WmiProvider())

        assert com.pythoncom.uninitialized == 1

    def test_missing_property_is_field_failure(self, fake_com):
        fake_com(rows=[{}])
        session = WmiProvider().connect(DEFAULT_NAMESPACE)

        with session, session.exec_query("SELECT * FROM X") as result, result.item(0) as item:
            with pytest.raises(FieldReadError):
                item.get("SessionID")

    def test_released_item_is_field_failure(self, fake_com):
        fake_com(rows=[{"SessionID": (CIM_SINT32, 5)}])
        session = WmiProvider().connect(DEFAULT_NAMESPACE)

        with session, session.exec_query("SELECT * FROM X") as result:
            item = result.item(0)
            item.close()
            with pytest.raises(FieldReadError):
                item.get("SessionID")


class TestWmiPropertyValues:
    """Test classification of property values by their CIM type."""

    def test_values_use_cim_type(self, fake_com):
        fake_com(rows=[{
            "SessionID": (CIM_SINT32, 5),
            "LinkSpeed": (CIM_UINT32, 1000),
            "ClientTimestamp": (CIM_UINT64, "1700000000"),
            "AvgBeaconLatency": (CIM_REAL64, 12.5),
            "City": (CIM_STRING, "Berlin"),
            "Country": (CIM_STRING, None),
        }])
        session = WmiProvider().connect(DEFAULT_NAMESPACE)

        with session, session.exec_query("SELECT * FROM X") as result, result.item(0) as item:
            assert item.get("SessionID") == Variant(VariantKind.INT32, 5)
            assert item.get("LinkSpeed") == Variant(VariantKind.UINT32, 1000)
            assert item.get("ClientTimestamp") == Variant(VariantKind.TEXT, "1700000000")
            assert item.get("AvgBeaconLatency") == Variant(VariantKind.FLOAT64, 12.5)
            assert item.get("Country").is_null

    def test_record_from_wmi_row(self, fake_com):
        fake_com(rows=[{
            "SessionID": (CIM_SINT32, 7),
            "ClientTimestamp": (CIM_UINT64, "1700000000"),
            "LinkSpeed": (CIM_UINT32, 100),
            "NetworkInterfaceType": (CIM_STRING, "Wi-Fi"),
        }])

        record = acquire_endpoint_metrics(WmiProvider())[0]

        assert record.session_id == 7
        assert record.client_timestamp == 1_700_000_000
        assert record.link_speed == 100
        assert record.network_interface_type == "Wi-Fi"
        assert record.signal_strength == 0
