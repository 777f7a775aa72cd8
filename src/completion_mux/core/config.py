"""
Configuration schema and loading for completion-mux tooling.

Uses Pydantic for validation and PyYAML for loading, with ${VAR} expansion
from the environment. Settings are frozen (immutable) after construction.
The multiplexer itself takes no configuration; these settings drive logging
and the demo CLI.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal, Self

import yaml
from pydantic import BaseModel, Field, model_validator


class LoggingSettings(BaseModel):
    """Logging output configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )


class DemoSettings(BaseModel):
    """Simulated operations for the demo command.

    Example YAML:
        demo:
          delays_ms: [30, 10, 20]
          fail_positions: [2]
    """

    model_config = {"frozen": True, "extra": "forbid"}

    delays_ms: list[int] = Field(
        default_factory=lambda: [30, 10, 20],
        description="Settle delay per simulated operation, in input order",
    )
    fail_positions: list[int] = Field(
        default_factory=list,
        description="Positions of operations that fail instead of succeeding",
    )

    @model_validator(mode="after")
    def _validate_positions(self) -> Self:
        """Validate delays are non-negative and fail positions index into delays_ms."""
        negative = [d for d in self.delays_ms if d < 0]
        if negative:
            raise ValueError(f"delays_ms must be >= 0, got {negative}")
        out_of_range = sorted(p for p in self.fail_positions if not 0 <= p < len(self.delays_ms))
        if out_of_range:
            raise ValueError(
                f"fail_positions {out_of_range} out of range for {len(self.delays_ms)} operations"
            )
        return self


class MuxSettings(BaseModel):
    """Top-level completion-mux settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    demo: DemoSettings = Field(default_factory=DemoSettings)


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unset variables without a default are left as-is, so validation reports
    them against the field they were meant for.
    """

    def replacer(match: re.Match[str]) -> str:
        env_value = os.environ.get(match.group(1))
        if env_value is not None:
            return env_value
        default = match.group(2)
        if default is not None:
            return default
        return match.group(0)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _ENV_VAR_PATTERN.sub(replacer, value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def load_settings(config_path: Path) -> MuxSettings:
    """Load settings from a YAML file.

    String values may reference the environment as ${VAR} or
    ${VAR:-default}; missing sections fall back to Pydantic defaults.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated MuxSettings instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If the top level of the file is not a mapping
        ValidationError: If configuration fails Pydantic validation
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"{config_path.name} must contain a mapping at the top level, got {type(raw).__name__}")

    return MuxSettings(**_expand_env_vars(raw))
