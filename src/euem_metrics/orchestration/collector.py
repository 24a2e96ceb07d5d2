"""Collector wiring acquisition, GUID correlation and output together."""

import logging
from pathlib import Path
from typing import Dict, List, Optional

from ..acquisition import InstrumentationProvider, SnapshotProvider, WmiProvider, acquire_endpoint_metrics
from ..errors import ConfigurationError, IdentifierSourceError
from ..identifiers import (
    EmptyIdentifierSource,
    FileIdentifierSource,
    IdentifierSource,
    RegistryIdentifierSource,
)
from ..metrics import EndpointMetric, assign_session_guids, print_key_value, records_to_dataframe
from ..utils.config import CollectorConfig, load_config

logger = logging.getLogger(__name__)

PROVIDER_CLASS_MAP = {
    "wmi": WmiProvider,
    "snapshot": SnapshotProvider,
}

IDENTIFIER_SOURCE_CLASS_MAP = {
    "registry": RegistryIdentifierSource,
    "file": FileIdentifierSource,
    "none": EmptyIdentifierSource,
}


class EndpointMetricsCollector:
    """Main entry point for one collection run.

    A run acquires all records, then reads the GUID mapping, then merges,
    then prints. Acquisition failures propagate to the caller; a failure to
    read the GUID mapping only degrades the SessionGUID values.
    """

    def __init__(
        self,
        config: Optional[CollectorConfig] = None,
        provider: Optional[InstrumentationProvider] = None,
        identifier_source: Optional[IdentifierSource] = None,
    ):
        """Initialize the collector.

        Args:
            config: Collector configuration (defaults when omitted)
            provider: Overrides the provider built from ``config.provider``
            identifier_source: Overrides the source built from ``config.identifiers``
        """
        self.config = config or CollectorConfig()
        self.provider = provider or self._create_provider()
        self.identifier_source = identifier_source or self._create_identifier_source()

    def _create_provider(self) -> InstrumentationProvider:
        provider_config = self.config.provider
        ProviderClass = PROVIDER_CLASS_MAP.get(provider_config.type)
        if not ProviderClass:
            raise ConfigurationError(f"Unknown provider type: {provider_config.type}")
        return ProviderClass.from_config(provider_config)

    def _create_identifier_source(self) -> IdentifierSource:
        identifier_config = self.config.identifiers
        SourceClass = IDENTIFIER_SOURCE_CLASS_MAP.get(identifier_config.type)
        if not SourceClass:
            raise ConfigurationError(f"Unknown identifier source type: {identifier_config.type}")
        return SourceClass.from_config(identifier_config)

    def acquire(self) -> List[EndpointMetric]:
        return acquire_endpoint_metrics(
            self.provider,
            namespace=self.config.provider.namespace,
            class_name=self.config.provider.class_name,
        )

    def read_session_guids(self) -> Optional[Dict[str, str]]:
        """Read the GUID mapping, or ``None`` if the source is unavailable."""
        try:
            return self.identifier_source.get_session_guids()
        except IdentifierSourceError as exc:
            logger.warning(f"Failed to get session GUIDs: {exc}")
            return None

    def collect(self) -> List[EndpointMetric]:
        """Acquire records and assign their session GUIDs."""
        records = self.acquire()
        assign_session_guids(records, self.read_session_guids())
        return records

    def emit(self, records: List[EndpointMetric]) -> None:
        """Print one key=value line per record and write the CSV if configured."""
        for record in records:
            print_key_value(record)

        csv_path = self.config.output.csv_path
        if csv_path:
            csv_file = Path(csv_path)
            try:
                csv_file.parent.mkdir(parents=True, exist_ok=True)
                records_to_dataframe(records).to_csv(csv_file, index=False)
            except OSError as exc:
                logger.warning(f"Failed to write CSV export {csv_file}: {exc}")
                return
            logger.info(f"Saved {len(records)} record(s) to {csv_file}")

    def run(self) -> List[EndpointMetric]:
        """Collect and emit; returns the emitted records."""
        records = self.collect()
        self.emit(records)
        return records

    @classmethod
    def from_config_file(cls, config_path: Optional[str] = None) -> "EndpointMetricsCollector":
        return cls(load_config(config_path))
