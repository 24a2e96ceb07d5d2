"""Acquisition of endpoint metric records from the instrumentation provider."""

import logging
from contextlib import ExitStack
from typing import Any, Callable, Dict, List

from ..errors import FieldReadError
from ..metrics.models import FIELD_TYPES, FLOAT64, INT64, TEXT, TIMESTAMP, UINT64, EndpointMetric
from ..variant import to_float64, to_int64, to_text, to_timestamp, to_uint64
from .provider import InstrumentationProvider, ResultItem

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "ROOT\\Citrix\\EUEM"
DEFAULT_CLASS_NAME = "Citrix_Euem_EndpointMetrics"

COERCERS: Dict[str, Callable[[Any], Any]] = {
    UINT64: to_uint64,
    INT64: to_int64,
    FLOAT64: to_float64,
    TEXT: to_text,
    TIMESTAMP: to_timestamp,
}


def build_select_all_query(class_name: str) -> str:
    return f"SELECT * FROM {class_name}"


def build_metric(item: ResultItem) -> EndpointMetric:
    """Populate a record from one result row, field by field.

    A property that cannot be read keeps its zero value; the remaining
    properties are still read.
    """
    metric = EndpointMetric()
    for name, (attribute, kind) in FIELD_TYPES.items():
        try:
            variant = item.get(name)
        except FieldReadError as exc:
            logger.debug(f"Skipping property {name}: {exc}")
            continue
        setattr(metric, attribute, COERCERS[kind](variant))
    return metric


def acquire_endpoint_metrics(
    provider: InstrumentationProvider,
    namespace: str = DEFAULT_NAMESPACE,
    class_name: str = DEFAULT_CLASS_NAME,
) -> List[EndpointMetric]:
    """Query the provider once and build one record per returned row.

    Args:
        provider: Provider to open the session with
        namespace: Instrumentation namespace holding the metrics class
        class_name: Class to select all rows from

    Returns:
        Records in the order the provider returned the rows

    Raises:
        ProviderConnectionError: If the session cannot be opened
        QueryError: If the query or its row count fails
        ItemFetchError: If any row cannot be fetched
    """
    records: List[EndpointMetric] = []

    with ExitStack() as stack:
        session = stack.enter_context(provider.connect(namespace))
        result = stack.enter_context(session.exec_query(build_select_all_query(class_name)))
        count = result.count()
        logger.info(f"{class_name} returned {count} row(s)")

        for index in range(count):
            with result.item(index) as item:
                records.append(build_metric(item))

    return records
