"""Session GUID mapping stored in the Windows registry by uberAgent."""

import logging
from typing import Dict

from ..errors import IdentifierSourceError
from .base import IdentifierSource

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_PATH = "SOFTWARE\\vast limits\\uberAgent\\SessionGuids"


class RegistryIdentifierSource(IdentifierSource):
    """Reads every value under an HKEY_LOCAL_MACHINE key.

    Each value name is a session ID and its string data is the session GUID.
    """

    def __init__(self, registry_path: str = DEFAULT_REGISTRY_PATH):
        self.registry_path = registry_path

    @classmethod
    def from_config(cls, identifier_config) -> "RegistryIdentifierSource":
        return cls(identifier_config.registry_path)

    def get_session_guids(self) -> Dict[str, str]:
        try:
            import winreg
        except ImportError as exc:
            raise IdentifierSourceError("The Windows registry is not available") from exc

        try:
            key = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, self.registry_path, 0, winreg.KEY_READ)
        except OSError as exc:
            raise IdentifierSourceError(
                f"Failed to open registry key {self.registry_path}: {exc}"
            ) from exc

        mapping: Dict[str, str] = {}
        with key:
            try:
                _, value_count, _ = winreg.QueryInfoKey(key)
            except OSError as exc:
                raise IdentifierSourceError(f"Failed to read registry value names: {exc}") from exc

            for index in range(value_count):
                try:
                    name, data, value_type = winreg.EnumValue(key, index)
                except OSError as exc:
                    logger.warning(f"Could not read registry value {index}: {exc}")
                    continue
                if value_type not in (winreg.REG_SZ, winreg.REG_EXPAND_SZ):
                    logger.warning(f"Could not read value for {name}: not a string value")
                    continue
                mapping[name] = data

        logger.debug(f"Read {len(mapping)} session GUID(s) from registry")
        return mapping
