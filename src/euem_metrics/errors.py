"""Project-specific exception types for clearer error semantics."""


class EuemMetricsError(Exception):
    """Base class for all collector errors."""
    pass


class ConfigurationError(EuemMetricsError, ValueError):
    """Raised when configuration loading or validation fails."""
    pass


class AcquisitionError(EuemMetricsError):
    """Fatal failure while acquiring metrics from the instrumentation provider."""
    pass


class ProviderConnectionError(AcquisitionError):
    """Cannot establish a session to the instrumentation namespace."""
    pass


class QueryError(AcquisitionError):
    """Cannot execute the query or read its result count."""
    pass


class ItemFetchError(AcquisitionError):
    """Cannot retrieve a row from an otherwise valid result set."""
    pass


class FieldReadError(EuemMetricsError):
    """Cannot read one named property of one row (non-fatal)."""
    pass


class IdentifierSourceError(EuemMetricsError):
    """Cannot read the session identifier mapping (non-fatal)."""
    pass
