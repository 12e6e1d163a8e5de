"""
Filesystem adapter for addt.

Handles locating, reading and writing the global and project config files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from addt.domain.config import ConfigFile
from addt.domain.exceptions import ConfigError

logger = logging.getLogger(__name__)

GLOBAL_CONFIG_DIR = ".addt"
GLOBAL_CONFIG_FILE = "config.yaml"
PROJECT_CONFIG_FILE = ".addt.yaml"


class FileSystemAdapter:
    """
    Adapter for filesystem operations.

    All config file I/O in addt goes through this adapter,
    making it easy to point at temporary directories in tests.
    """

    def __init__(self, home: Path | None = None, project_dir: Path | None = None) -> None:
        """
        Initialize the filesystem adapter.

        Args:
            home: Home directory holding ~/.addt (defaults to the user's home).
            project_dir: Project directory holding .addt.yaml (defaults to cwd).
        """
        self.home = home or Path.home()
        self.project_dir = project_dir or Path.cwd()

    @property
    def global_config_path(self) -> Path:
        return self.home / GLOBAL_CONFIG_DIR / GLOBAL_CONFIG_FILE

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / PROJECT_CONFIG_FILE

    @property
    def project_name(self) -> str:
        """Project directory name, used for telemetry attributes."""
        return self.project_dir.resolve().name

    def read_yaml(self, path: Path | str) -> dict[str, Any]:
        """
        Read and parse a YAML mapping.

        Args:
            path: Path to the YAML file.

        Returns:
            Parsed data; an empty dict for a missing or empty file.

        Raises:
            ConfigError: If the file cannot be read or isn't a YAML mapping.
        """
        path = self._resolve_path(path)

        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise ConfigError(f"Error reading config: {e}", config_path=str(path))

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config: {e}", config_path=str(path))

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config must be a mapping, got {type(data).__name__}",
                config_path=str(path),
            )
        return data

    def write_yaml(self, path: Path | str, data: dict[str, Any]) -> None:
        """Write a mapping as YAML, creating parent directories."""
        path = self._resolve_path(path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
                encoding="utf-8",
            )
        except OSError as e:
            raise ConfigError(f"Error writing config: {e}", config_path=str(path))

        logger.debug("Wrote config %s", path)

    def read_config(self, path: Path | str) -> ConfigFile:
        """
        Load a config file.

        Raises:
            ConfigError: If the file is unreadable or fails validation.
        """
        data = self.read_yaml(path)

        try:
            return ConfigFile.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config schema: {e}", config_path=str(path))

    def write_config(self, path: Path | str, config: ConfigFile) -> None:
        self.write_yaml(path, config.to_yaml_dict())

    def read_global_config(self) -> ConfigFile:
        return self.read_config(self.global_config_path)

    def read_project_config(self) -> ConfigFile:
        return self.read_config(self.project_config_path)

    def _resolve_path(self, path: Path | str) -> Path:
        """Resolve a path relative to the project directory."""
        if isinstance(path, str):
            path = Path(path)

        if path.is_absolute():
            return path

        return self.project_dir / path
