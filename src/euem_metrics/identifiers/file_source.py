"""Session GUID mapping loaded from a YAML or JSON file."""

import json
import logging
from pathlib import Path
from typing import Dict

import yaml

from ..errors import IdentifierSourceError
from .base import IdentifierSource

logger = logging.getLogger(__name__)


class FileIdentifierSource(IdentifierSource):
    """Reads a flat ``session_id: guid`` mapping from disk."""

    def __init__(self, file_path: str):
        self.file_path = file_path

    @classmethod
    def from_config(cls, identifier_config) -> "FileIdentifierSource":
        return cls(identifier_config.file_path)

    def get_session_guids(self) -> Dict[str, str]:
        path = Path(self.file_path)
        try:
            with open(path, "r") as f:
                if path.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as exc:
            raise IdentifierSourceError(f"Failed to read GUID map {path}: {exc}") from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise IdentifierSourceError(f"GUID map {path} must be a mapping")

        logger.debug(f"Loaded {len(data)} session GUID(s) from {path}")
        # YAML turns bare session IDs into ints; keys are compared as text
        return {str(key): str(value) for key, value in data.items()}
