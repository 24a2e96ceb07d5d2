"""Data models for endpoint metric records."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

# Destination kinds used by the acquisition pipeline
UINT64 = "uint64"
INT64 = "int64"
FLOAT64 = "float64"
TEXT = "text"
TIMESTAMP = "timestamp"


@dataclass
class EndpointMetric:
    """One session snapshot from the endpoint metrics provider.

    Every field carries its zero value until acquisition populates it, so a
    record is always complete even when the provider omits properties.
    """

    # Identity and timing
    session_id: int = 0  # 0 means no session associated
    client_timestamp: int = 0
    timestamp: Optional[datetime] = None

    # Processor averages (percent) and peaks
    avg_beacon_latency: float = 0.0
    avg_privileged_time: float = 0.0
    avg_processor_time: float = 0.0
    avg_user_time: float = 0.0
    max_privileged_time: int = 0
    max_processor_time: int = 0
    max_user_time: int = 0

    # Throughput
    avg_throughput_bytes_rcvd: float = 0.0
    avg_throughput_bytes_sent: float = 0.0
    max_throughput_bytes_rcvd: int = 0
    max_throughput_bytes_sent: int = 0

    # Resource usage
    gpu_avg_usage: float = 0.0
    gpu_max_usage: int = 0
    ram_avg_usage: float = 0.0
    ram_max_usage: int = 0

    # Network descriptors
    city: str = ""
    country: str = ""
    endpoint_ip: str = ""
    isp: str = ""
    network_interface_type: str = ""
    link_speed: int = 0
    signal_strength: int = 0

    # Units
    latency_unit: str = ""
    speed_unit: str = ""

    # Assigned by the merge stage, never by acquisition
    session_guid: str = ""

    def get(self, property_name: str) -> Any:
        """Read a field by its provider property name."""
        return getattr(self, PROPERTY_ATTRIBUTES[property_name])

    def to_dict(self) -> Dict[str, Any]:
        """Return every field keyed by provider property name."""
        return {name: self.get(name) for name in PROPERTY_ATTRIBUTES}


# Provider property name -> (record attribute, destination kind), in the
# order the provider class declares them.
FIELD_TYPES: Dict[str, Tuple[str, str]] = {
    "AvgBeaconLatency": ("avg_beacon_latency", FLOAT64),
    "AvgPrivilegedTime": ("avg_privileged_time", FLOAT64),
    "AvgProcessorTime": ("avg_processor_time", FLOAT64),
    "AvgThroughputBytesRcvd": ("avg_throughput_bytes_rcvd", FLOAT64),
    "AvgThroughputBytesSent": ("avg_throughput_bytes_sent", FLOAT64),
    "AvgUserTime": ("avg_user_time", FLOAT64),
    "City": ("city", TEXT),
    "ClientTimestamp": ("client_timestamp", UINT64),
    "Country": ("country", TEXT),
    "EndpointIP": ("endpoint_ip", TEXT),
    "GpuAvgUsage": ("gpu_avg_usage", FLOAT64),
    "GpuMaxUsage": ("gpu_max_usage", UINT64),
    "ISP": ("isp", TEXT),
    "LatencyUnit": ("latency_unit", TEXT),
    "LinkSpeed": ("link_speed", UINT64),
    "MaxPrivilegedTime": ("max_privileged_time", UINT64),
    "MaxProcessorTime": ("max_processor_time", UINT64),
    "MaxThroughputBytesRcvd": ("max_throughput_bytes_rcvd", UINT64),
    "MaxThroughputBytesSent": ("max_throughput_bytes_sent", UINT64),
    "MaxUserTime": ("max_user_time", UINT64),
    "NetworkInterfaceType": ("network_interface_type", TEXT),
    "RamAvgUsage": ("ram_avg_usage", FLOAT64),
    "RamMaxUsage": ("ram_max_usage", UINT64),
    "SessionID": ("session_id", INT64),
    "SignalStrength": ("signal_strength", UINT64),
    "SpeedUnit": ("speed_unit", TEXT),
    "Timestamp": ("timestamp", TIMESTAMP),
}

PROPERTY_ATTRIBUTES: Dict[str, str] = {
    name: attribute for name, (attribute, _) in FIELD_TYPES.items()
}
PROPERTY_ATTRIBUTES["SessionGUID"] = "session_guid"
