"""Collection run orchestration."""

from .collector import IDENTIFIER_SOURCE_CLASS_MAP, PROVIDER_CLASS_MAP, EndpointMetricsCollector

__all__ = ["EndpointMetricsCollector", "IDENTIFIER_SOURCE_CLASS_MAP", "PROVIDER_CLASS_MAP"]
