"""Global configuration — XDG paths, config file, env vars, defaults."""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

WORKSPACE_PLACEHOLDER = "${workspaceFolder}"

_TRUE_VALUES = {"1", "true", "yes", "on"}

# Config-file keys that map straight onto EngineConfig fields
_FILE_KEYS = (
    "analyzer_path",
    "build_path",
    "enabled",
    "profile",
    "clang_path",
    "exclude",
    "web_port",
)


def _parse_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def _default_data_dir() -> Path:
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / "lintbridge"
    return Path.home() / ".local" / "share" / "lintbridge"


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lintbridge"
    return Path.home() / ".config" / "lintbridge"


def expand_workspace_folder(value: str, root: str | Path | None) -> str:
    """Substitute the ``${workspaceFolder}`` placeholder with ``root``."""
    if root is None or WORKSPACE_PLACEHOLDER not in value:
        return value
    return value.replace(WORKSPACE_PLACEHOLDER, str(root))


@dataclass
class EngineConfig:
    """Analyzer and application configuration, read at call time."""

    analyzer_path: str = ""
    build_path: str = "."
    enabled: bool = True
    profile: str = "auxid"
    clang_path: str = "clang"
    exclude: list[str] = field(default_factory=list)
    data_dir: Path = field(default_factory=_default_data_dir)
    config_dir: Path = field(default_factory=_default_config_dir)
    web_host: str = "127.0.0.1"  # Loopback only
    web_port: int = 8471
    verbose: bool = False

    @classmethod
    def load(cls, path: str | Path | None = None) -> EngineConfig:
        """Load config from an optional YAML file, then environment variables."""
        config = cls()

        config_file = Path(path) if path else config.config_dir / "config.yaml"
        if path or config_file.is_file():
            config._apply_file(config_file)

        env_analyzer = os.environ.get("LINTBRIDGE_ANALYZER_PATH")
        if env_analyzer:
            config.analyzer_path = env_analyzer

        env_build = os.environ.get("LINTBRIDGE_BUILD_PATH")
        if env_build:
            config.build_path = env_build

        env_profile = os.environ.get("LINTBRIDGE_PROFILE")
        if env_profile:
            config.profile = env_profile

        env_enabled = os.environ.get("LINTBRIDGE_ENABLED")
        if env_enabled:
            config.enabled = _parse_bool(env_enabled)

        env_port = os.environ.get("LINTBRIDGE_WEB_PORT")
        if env_port:
            config.web_port = int(env_port)

        return config

    def _apply_file(self, config_file: Path) -> None:
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if data is None:
            return
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_file} must be a mapping")

        for key in _FILE_KEYS:
            if key not in data:
                continue
            value = data[key]
            if key == "exclude":
                value = [value] if isinstance(value, str) else list(value or [])
            elif key == "web_port":
                value = int(value)
            elif key == "enabled":
                value = _parse_bool(value)
            else:
                value = str(value)
            setattr(self, key, value)

    def with_workspace(self, root: str | Path | None) -> EngineConfig:
        """Return a copy with ``${workspaceFolder}`` expanded in path settings."""
        return dataclasses.replace(
            self,
            analyzer_path=expand_workspace_folder(self.analyzer_path, root),
            build_path=expand_workspace_folder(self.build_path or ".", root),
            exclude=list(self.exclude),
        )
