"""Configuration settings and loading."""

from __future__ import annotations

import functools
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from madhouse.core.outcome import Mode
from madhouse.errors import ConfigError, ErrorContext

logger = logging.getLogger(__name__)

_MODE_ALIASES = {
    "normal": Mode.NORMAL,
    "0": Mode.NORMAL,
    "false": Mode.NORMAL,
    "randomized": Mode.RANDOMIZED,
    "random": Mode.RANDOMIZED,
    "1": Mode.RANDOMIZED,
    "true": Mode.RANDOMIZED,
}


class MadhouseConfig(BaseSettings):
    """Configuration for one process' scenario runs.

    Built once and passed to the runner; never re-read mid-run.
    """

    model_config = SettingsConfigDict(
        env_prefix="MADHOUSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_ignore_empty=True,
        frozen=True,
    )

    mode: Mode = Mode.NORMAL
    max_examples: int = Field(default=100, ge=1)
    max_shrink_iters: int | None = Field(
        default=None,
        ge=0,
        description="On/off switch: 0 disables shrinking, any other value keeps Hypothesis' budget",
    )
    retry_limit: int = Field(
        default=100, ge=1, description="Draws per randomized step before giving up"
    )
    seed: int | None = None
    verbose: bool = False

    @field_validator("mode", mode="before")
    @classmethod
    def validate_mode(cls, v: Any) -> Mode:
        if isinstance(v, Mode):
            return v
        mode = _MODE_ALIASES.get(str(v).strip().lower())
        if mode is None:
            raise ValueError(f"Invalid mode: {v!r}. Valid: normal, randomized")
        return mode

    @property
    def randomized(self) -> bool:
        return self.mode == Mode.RANDOMIZED

    @property
    def shrinking(self) -> bool:
        """False only when max_shrink_iters is 0; Hypothesis has no public shrink cap."""
        return self.max_shrink_iters != 0


def load_config(config_path: str | Path | None = None) -> MadhouseConfig:
    """Load configuration from file and environment.

    Priority: env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                try:
                    config_data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(
                        f"Could not parse {config_path}: {e}",
                        cause=e,
                        context=ErrorContext(extra={"path": str(config_path)}),
                    ) from e
            if not isinstance(config_data, dict):
                raise ConfigError(
                    f"{config_path} must contain a mapping, got {type(config_data).__name__}",
                    context=ErrorContext(extra={"path": str(config_path)}),
                )
        else:
            logger.debug("Config file %s not found, using defaults", config_path)

    env_overrides = _get_env_overrides()
    config_data.update(env_overrides)

    try:
        return MadhouseConfig(**config_data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigError(
            f"Invalid configuration: {first.get('msg', e)}",
            field=field or None,
            value=first.get("input"),
            cause=e,
        ) from e


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        # Bare opt-in flag: MADHOUSE=1 switches to randomized mode
        "MADHOUSE": "mode",
        "MADHOUSE_MODE": "mode",
        "MADHOUSE_MAX_EXAMPLES": ("max_examples", int),
        "MADHOUSE_MAX_SHRINK_ITERS": ("max_shrink_iters", int),
        "MADHOUSE_RETRY_LIMIT": ("retry_limit", int),
        "MADHOUSE_SEED": ("seed", int),
        "MADHOUSE_VERBOSE": ("verbose", lambda x: x.lower() in ("true", "1", "yes")),
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is None or value == "":
            continue
        if isinstance(config_key, tuple):
            key, converter = config_key
            try:
                overrides[key] = converter(value)
            except ValueError as e:
                raise ConfigError(
                    f"{env_key} has an invalid value: {value!r}",
                    field=key,
                    value=value,
                    cause=e,
                ) from e
        else:
            overrides[config_key] = value

    return overrides


@functools.lru_cache(maxsize=1)
def get_config() -> MadhouseConfig:
    """Return the process-wide configuration, loading it on first use.

    The file named by MADHOUSE_CONFIG (default ``madhouse.yaml``) is read
    once; later calls return the same frozen object.
    """
    config = load_config(os.environ.get("MADHOUSE_CONFIG", "madhouse.yaml"))
    logger.debug("madhouse configuration: %s", config.model_dump())
    return config
