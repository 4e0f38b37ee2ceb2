"""Configuration management for madhouse."""

from madhouse.config.settings import MadhouseConfig, get_config, load_config
from madhouse.core.outcome import Mode

__all__ = [
    "MadhouseConfig",
    "Mode",
    "get_config",
    "load_config",
]
