"""Endpoint metric records, GUID merge and output formatting."""

from .formatter import OUTPUT_FIELDS, format_key_value, print_key_value, records_to_dataframe
from .merge import NO_GUID_FOUND, NO_SESSION_ID, assign_session_guids
from .models import FIELD_TYPES, EndpointMetric

__all__ = [
    "EndpointMetric",
    "FIELD_TYPES",
    "OUTPUT_FIELDS",
    "NO_GUID_FOUND",
    "NO_SESSION_ID",
    "assign_session_guids",
    "format_key_value",
    "print_key_value",
    "records_to_dataframe",
]
