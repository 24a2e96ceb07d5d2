"""Sources of session ID to session GUID mappings."""

from .base import EmptyIdentifierSource, IdentifierSource
from .file_source import FileIdentifierSource
from .registry import DEFAULT_REGISTRY_PATH, RegistryIdentifierSource

__all__ = [
    "DEFAULT_REGISTRY_PATH",
    "EmptyIdentifierSource",
    "FileIdentifierSource",
    "IdentifierSource",
    "RegistryIdentifierSource",
]
