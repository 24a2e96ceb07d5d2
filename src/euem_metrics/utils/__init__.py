"""Configuration utilities."""

from .config import CollectorConfig, default_config_dict, load_config, validate_config_file

__all__ = ["CollectorConfig", "default_config_dict", "load_config", "validate_config_file"]
