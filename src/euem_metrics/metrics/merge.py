"""Attach session correlation GUIDs to acquired records."""

import logging
from typing import Dict, Iterable, Optional

from .models import EndpointMetric

logger = logging.getLogger(__name__)

NO_SESSION_ID = "No SessionID available"
NO_GUID_FOUND = "No GUID found for SessionID"


def resolve_session_guid(session_id: int, mapping: Dict[str, str]) -> str:
    """Return the GUID for a session ID, or the matching sentinel."""
    if session_id == 0:
        return NO_SESSION_ID
    return mapping.get(str(session_id), NO_GUID_FOUND)


def assign_session_guids(
    records: Iterable[EndpointMetric], mapping: Optional[Dict[str, str]]
) -> None:
    """Set ``session_guid`` on every record in place.

    Args:
        records: Records produced by one acquisition run
        mapping: Session ID (decimal text) to GUID. ``None`` means the
            identifier source was unavailable and is treated as empty.
    """
    mapping = mapping or {}
    unmapped = 0
    for record in records:
        record.session_guid = resolve_session_guid(record.session_id, mapping)
        if record.session_guid == NO_GUID_FOUND:
            unmapped += 1

    if unmapped:
        logger.info(f"{unmapped} session(s) had no GUID mapping")
