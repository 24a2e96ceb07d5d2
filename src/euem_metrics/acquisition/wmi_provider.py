"""WMI provider backed by pywin32 COM automation (Windows only)."""

import logging
from typing import Any

from ..errors import FieldReadError, ItemFetchError, ProviderConnectionError, QueryError
from ..variant import Variant
from .provider import InstrumentationProvider, ProviderSession, QueryResult, ResultItem

logger = logging.getLogger(__name__)


def _import_com():
    """Import the pywin32 COM modules, which only exist on Windows."""
    try:
        import pythoncom
        import pywintypes
        import win32com.client
    except ImportError as exc:
        raise ProviderConnectionError(
            "WMI access requires pywin32 on Windows"
        ) from exc
    return pythoncom, pywintypes, win32com.client


class WmiResultItem(ResultItem):
    """An SWbemObject from a query result."""

    def __init__(self, wbem_object: Any, com_error: type):
        self._object = wbem_object
        self._com_error = com_error

    def get(self, name: str) -> Variant:
        if self._object is None:
            raise FieldReadError(f"Item already released, cannot read {name}")
        try:
            prop = self._object.Properties_.Item(name)
            return Variant.from_cim(prop.CIMType, prop.Value)
        except (self._com_error, AttributeError) as exc:
            raise FieldReadError(f"Failed to read property {name}: {exc}") from exc

    def close(self) -> None:
        # Dropping the last reference releases the COM object
        self._object = None


class WmiQueryResult(QueryResult):
    """An SWbemObjectSet returned by ExecQuery."""

    def __init__(self, object_set: Any, com_error: type):
        self._object_set = object_set
        self._com_error = com_error

    def count(self) -> int:
        try:
            return int(self._object_set.Count)
        except (self._com_error, AttributeError, TypeError) as exc:
            raise QueryError(f"Failed to get result count: {exc}") from exc

    def item(self, index: int) -> WmiResultItem:
        try:
            wbem_object = self._object_set.ItemIndex(index)
        except (self._com_error, AttributeError) as exc:
            raise ItemFetchError(f"Failed to get result item {index}: {exc}") from exc
        return WmiResultItem(wbem_object, self._com_error)

    def close(self) -> None:
        self._object_set = None


class WmiSession(ProviderSession):
    """A connected SWbemServices object plus the COM apartment it lives in."""

    def __init__(self, service: Any, pythoncom_module: Any, com_error: type):
        self._service = service
        self._pythoncom = pythoncom_module
        self._com_error = com_error

    def exec_query(self, query: str) -> WmiQueryResult:
        logger.debug(f"Executing WMI query: {query}")
        try:
            object_set = self._service.ExecQuery(query)
        except (self._com_error, AttributeError) as exc:
            raise QueryError(f"Failed to execute WMI query: {exc}") from exc
        return WmiQueryResult(object_set, self._com_error)

    def close(self) -> None:
        if self._pythoncom is None:
            return
        self._service = None
        self._pythoncom.CoUninitialize()
        self._pythoncom = None


class WmiProvider(InstrumentationProvider):
    """Connects to a local or remote WMI namespace via SWbemLocator."""

    def __init__(self, computer: str = "."):
        self.computer = computer

    @classmethod
    def from_config(cls, provider_config) -> "WmiProvider":
        return cls(computer=provider_config.computer)

    def connect(self, namespace: str) -> WmiSession:
        pythoncom, pywintypes, client = _import_com()

        try:
            pythoncom.CoInitializeEx(pythoncom.COINIT_MULTITHREADED)
        except pywintypes.com_error as exc:
            raise ProviderConnectionError(f"Failed to initialize COM: {exc}") from exc

        try:
            locator = client.Dispatch("WbemScripting.SWbemLocator")
            service = locator.ConnectServer(self.computer, namespace)
        except pywintypes.com_error as exc:
            pythoncom.CoUninitialize()
            raise ProviderConnectionError(
                f"Failed to connect to WMI namespace {namespace}: {exc}"
            ) from exc

        logger.info(f"Connected to WMI namespace {namespace} on {self.computer}")
        return WmiSession(service, pythoncom, pywintypes.com_error)
