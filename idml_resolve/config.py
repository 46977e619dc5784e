"""Configuration for idml-resolve.

Settings are read from a YAML file. Lookup order when no explicit path is
given:

1. ``./idml-resolve.yaml``
2. ``~/.config/idml-resolve/config.yaml``
3. Built-in defaults
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from idml_resolve.exceptions import ConfigError

CONFIG_FILENAME = "idml-resolve.yaml"
USER_CONFIG_PATH = Path("~/.config/idml-resolve/config.yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    """Resolution settings shared by the API and the CLI."""

    precision: int = 6
    default_font: str = "Roboto"
    default_text_color: str = "Color/Black"
    split_window_ratio: float = 0.2
    split_min_window: int = 20
    substitute_fonts: bool = False
    unit_scale: float = 1.0
    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build a validated config from a parsed YAML mapping."""
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

        values = dict(data)
        if "log_level" in values and isinstance(values["log_level"], str):
            values["log_level"] = values["log_level"].upper()

        config = cls(**values)
        config.validate()
        return config

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """Load config from ``path`` or the first default location that exists."""
        if path is not None:
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return cls._load_file(path)

        for candidate in (Path.cwd() / CONFIG_FILENAME, USER_CONFIG_PATH.expanduser()):
            if candidate.exists():
                return cls._load_file(candidate)
        return cls()

    @classmethod
    def _load_file(cls, path: Path) -> Config:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if data is None:
            return cls()
        return cls.from_dict(data)

    def validate(self) -> None:
        if not isinstance(self.precision, int) or isinstance(self.precision, bool):
            raise ConfigError(f"precision must be an integer, got {self.precision!r}")
        if not 0 <= self.precision <= 12:
            raise ConfigError(f"precision must be between 0 and 12, got {self.precision}")
        if not isinstance(self.default_font, str) or not self.default_font:
            raise ConfigError("default_font must be a non-empty string")
        if not isinstance(self.default_text_color, str) or not self.default_text_color:
            raise ConfigError("default_text_color must be a non-empty string")
        if not isinstance(self.split_window_ratio, (int, float)) or not 0 < self.split_window_ratio <= 1:
            raise ConfigError(
                f"split_window_ratio must be in (0, 1], got {self.split_window_ratio!r}"
            )
        if (
            not isinstance(self.split_min_window, int)
            or isinstance(self.split_min_window, bool)
            or self.split_min_window < 1
        ):
            raise ConfigError(
                f"split_min_window must be a positive integer, got {self.split_min_window!r}"
            )
        if not isinstance(self.substitute_fonts, bool):
            raise ConfigError("substitute_fonts must be true or false")
        if not isinstance(self.unit_scale, (int, float)) or self.unit_scale <= 0:
            raise ConfigError(f"unit_scale must be positive, got {self.unit_scale!r}")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
