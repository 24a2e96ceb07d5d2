"""Key=value serialization of endpoint metric records."""

from typing import Any, List, Sequence

import click
import pandas as pd

from .models import PROPERTY_ATTRIBUTES, EndpointMetric

# Emitted keys, in order. Other acquired fields stay on the record only.
OUTPUT_FIELDS = (
    "AvgBeaconLatency",
    "AvgThroughputBytesRcvd",
    "AvgThroughputBytesSent",
    "ClientTimestamp",
    "GpuAvgUsage",
    "GpuMaxUsage",
    "LinkSpeed",
    "MaxPrivilegedTime",
    "MaxProcessorTime",
    "MaxThroughputBytesRcvd",
    "MaxThroughputBytesSent",
    "MaxUserTime",
    "NetworkInterfaceType",
    "RamMaxUsage",
    "SessionGUID",
    "SignalStrength",
)


def _render(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def format_key_value(metric: EndpointMetric, fields: Sequence[str] = OUTPUT_FIELDS) -> str:
    """Render a record as one line of space-separated ``key=value`` tokens."""
    return " ".join(f"{name}={_render(metric.get(name))}" for name in fields)


def print_key_value(metric: EndpointMetric) -> None:
    """Write a record's key=value line to standard output."""
    click.echo(format_key_value(metric))


def records_to_dataframe(records: List[EndpointMetric]) -> pd.DataFrame:
    """Get all acquired fields of the records as a pandas DataFrame."""
    if not records:
        return pd.DataFrame(columns=list(PROPERTY_ATTRIBUTES))
    return pd.DataFrame([record.to_dict() for record in records])
