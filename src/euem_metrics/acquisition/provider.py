"""Abstract interface to a management-instrumentation provider.

The object model mirrors WMI scripting: a session on a namespace executes a
query, the query result exposes a count and indexed items, and each item
exposes named properties. Every handle must be closed by whoever obtained
it; handles are context managers so callers can scope them.
"""

from abc import ABC, abstractmethod

from ..variant import Variant


class ProviderHandle(ABC):
    """A provider resource that must be released explicitly."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying resource. Must be safe to call twice."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ResultItem(ProviderHandle):
    """One row of a query result."""

    @abstractmethod
    def get(self, name: str) -> Variant:
        """Read one named property.

        Raises:
            FieldReadError: If the property cannot be read
        """
        pass


class QueryResult(ProviderHandle):
    """The rows returned by one query execution."""

    @abstractmethod
    def count(self) -> int:
        """Number of rows in the result."""
        pass

    @abstractmethod
    def item(self, index: int) -> ResultItem:
        """Fetch the row at ``index`` (0-based)."""
        pass


class ProviderSession(ProviderHandle):
    """A connection to one provider namespace."""

    @abstractmethod
    def exec_query(self, query: str) -> QueryResult:
        """Execute a query and return its result set."""
        pass


class InstrumentationProvider(ABC):
    """Factory for provider sessions."""

    @abstractmethod
    def connect(self, namespace: str) -> ProviderSession:
        """Open a session to ``namespace``."""
        pass
