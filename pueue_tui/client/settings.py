"""Locate and load the daemon configuration."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigError

CONFIG_ENV_VAR = "PUEUE_CONFIG_PATH"
CONFIG_FILE_NAME = "pueue.yml"


def config_candidates(config_path: Optional[Path] = None) -> list[Path]:
    """Return the config file locations to try, in priority order."""
    if config_path is not None:
        return [Path(config_path).expanduser()]

    candidates = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path).expanduser())

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_home:
        candidates.append(Path(xdg_home) / "pueue" / CONFIG_FILE_NAME)
    candidates.append(Path.home() / ".config" / "pueue" / CONFIG_FILE_NAME)
    candidates.append(Path.cwd() / CONFIG_FILE_NAME)
    return candidates


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


@dataclass(frozen=True)
class Settings:
    """Resolved configuration used to reach the daemon."""
    path: Path
    profile: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def shared(self) -> dict[str, Any]:
        """The ``shared`` section holding connection parameters."""
        return self.data.get("shared") or {}

    @classmethod
    def read(cls, config_path: Optional[Path] = None, profile: Optional[str] = None) -> "Settings":
        """Find, parse and apply the optional profile.

        Raises:
            ConfigError: If no configuration file exists, it is not valid
                YAML, or the profile is unknown.
        """
        path = next((p for p in config_candidates(config_path) if p.is_file()), None)
        if path is None:
            raise ConfigError("Couldn't find a configuration file. Did you start the daemon yet?")

        try:
            data = yaml.safe_load(path.read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read configuration {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {path} is not a mapping")

        if profile is not None:
            profiles = data.get("profiles") or {}
            if profile not in profiles:
                raise ConfigError(f"Couldn't find profile '{profile}' in {path}")
            data = _merge(data, profiles[profile] or {})

        return cls(path=path, profile=profile, data=data)
