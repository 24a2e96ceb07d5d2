"""
Collector configuration models and loading.

A configuration file is optional: the defaults query the Citrix EUEM WMI
namespace and correlate sessions through the uberAgent registry key, which
is what the collector does when run without arguments.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..acquisition.pipeline import DEFAULT_CLASS_NAME, DEFAULT_NAMESPACE
from ..errors import ConfigurationError
from ..identifiers.registry import DEFAULT_REGISTRY_PATH

logger = logging.getLogger(__name__)

_CLASS_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class ProviderConfig(BaseModel):
    """Where endpoint metrics are queried from."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["wmi", "snapshot"] = "wmi"
    namespace: str = DEFAULT_NAMESPACE
    class_name: str = DEFAULT_CLASS_NAME
    computer: str = "."
    snapshot_path: Optional[str] = None

    @field_validator("class_name")
    @classmethod
    def _check_class_name(cls, value: str) -> str:
        if not _CLASS_NAME.fullmatch(value):
            raise ValueError(f"invalid class name: {value!r}")
        return value

    @model_validator(mode="after")
    def _check_snapshot_path(self) -> "ProviderConfig":
        if self.type == "snapshot" and not self.snapshot_path:
            raise ValueError("snapshot provider requires snapshot_path")
        return self


class IdentifierConfig(BaseModel):
    """Where the session ID to GUID mapping is read from."""

    model_config = ConfigDict(extra="forbid")

    type: Literal["registry", "file", "none"] = "registry"
    registry_path: str = DEFAULT_REGISTRY_PATH
    file_path: Optional[str] = None

    @model_validator(mode="after")
    def _check_file_path(self) -> "IdentifierConfig":
        if self.type == "file" and not self.file_path:
            raise ValueError("file identifier source requires file_path")
        return self


class OutputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Optional CSV export with every acquired field
    csv_path: Optional[str] = None


class CollectorConfig(BaseModel):
    """Complete collector configuration."""

    model_config = ConfigDict(extra="forbid")

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    identifiers: IdentifierConfig = Field(default_factory=IdentifierConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def _format_validation_errors(exc: ValidationError) -> List[str]:
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        errors.append(f"{location}: {error['msg']}" if location else error["msg"])
    return errors


def _read_config_data(config_path: str) -> Dict[str, Any]:
    config_file = Path(config_path)
    try:
        with open(config_file) as f:
            if config_file.suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read configuration {config_path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration {config_path} must be a mapping")
    return data


def load_config(config_path: Optional[str] = None) -> CollectorConfig:
    """Load and validate a configuration file, or return the defaults.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    if config_path is None:
        return CollectorConfig()

    data = _read_config_data(config_path)
    try:
        config = CollectorConfig.model_validate(data)
    except ValidationError as exc:
        errors = _format_validation_errors(exc)
        raise ConfigurationError(
            f"Invalid configuration {config_path}: " + "; ".join(errors)
        ) from exc

    logger.info(f"Loaded configuration from {config_path}")
    return config


def validate_config_file(config_path: str) -> Tuple[bool, List[str], Optional[CollectorConfig]]:
    """
    Load and validate a configuration file without running a collection.

    Returns:
        (is_valid, errors, config)
    """
    try:
        data = _read_config_data(config_path)
    except ConfigurationError as exc:
        return False, [str(exc)], None

    try:
        config = CollectorConfig.model_validate(data)
    except ValidationError as exc:
        errors = _format_validation_errors(exc)
        logger.warning(f"Configuration has {len(errors)} validation errors")
        for error in errors[:10]:
            logger.warning(f"  - {error}")
        return False, errors, None

    return True, [], config


def default_config_dict() -> Dict[str, Any]:
    """The default configuration as plain data, for writing example files."""
    return CollectorConfig().model_dump()
