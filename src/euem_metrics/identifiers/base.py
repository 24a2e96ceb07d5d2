"""Interface for sources of session ID to session GUID mappings."""

from abc import ABC, abstractmethod
from typing import Dict


class IdentifierSource(ABC):
    """Produces the mapping used to correlate records with session GUIDs."""

    @abstractmethod
    def get_session_guids(self) -> Dict[str, str]:
        """Return session ID (decimal text) -> session GUID.

        Raises:
            IdentifierSourceError: If the mapping cannot be read at all
        """
        pass


class EmptyIdentifierSource(IdentifierSource):
    """Source used when correlation is disabled."""

    @classmethod
    def from_config(cls, identifier_config) -> "EmptyIdentifierSource":
        return cls()

    def get_session_guids(self) -> Dict[str, str]:
        return {}
