"""Configuration loading.

Settings come from a global YAML file and, optionally, a project file found
by walking up from the working directory. Project keys override global ones.

Global file: $PRR_CONFIG, else $XDG_CONFIG_HOME/prr/config.yaml
Project file: the nearest .prr.yaml

Example:
    workdir: /home/me/reviews
    repository: danobi/prr
    use_position: false
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import yaml

LOCAL_CONFIG_FILE_NAME = ".prr.yaml"

_KNOWN_KEYS = {"workdir", "repository", "host", "editor", "use_position"}


class ConfigError(Exception):
    """Raised when a configuration file is unreadable or invalid."""

    pass


@dataclass
class Config:
    """User configuration.

    Attributes:
        workdir: Directory for review files
        repository: Default owner/repo so a bare PR number is accepted
        host: GitHub Enterprise host handed to gh
        editor: Editor command for review files (falls back to $EDITOR)
        use_position: Address comments by diff position instead of line/side
    """

    workdir: Path
    repository: str | None = None
    host: str | None = None
    editor: str | None = None
    use_position: bool = False

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict, environ: Mapping[str, str] | None = None) -> Config:
        """Build a config from a parsed config file.

        Raises:
            ConfigError: On unknown keys or an invalid workdir
        """
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(sorted(unknown))}")

        workdir = data.get("workdir")
        if workdir is None:
            workdir_path = default_workdir(environ)
        elif str(workdir).startswith("~"):
            raise ConfigError("Workdir may not use '~' to denote home directory")
        else:
            workdir_path = Path(workdir)

        use_position = data.get("use_position", False)
        if not isinstance(use_position, bool):
            raise ConfigError(f"use_position must be true or false, got {use_position!r}")

        return cls(
            workdir=workdir_path,
            repository=data.get("repository"),
            host=data.get("host"),
            editor=data.get("editor"),
            use_position=use_position,
        )

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        cwd: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> Config:
        """Load the global config, overlaid with the nearest project config.

        Args:
            config_path: Explicit global config file (default: see default_config_path)
            cwd: Directory to start the project config search from
            environ: Environment to read variables from (default: os.environ)

        Returns:
            Merged Config; missing files contribute nothing
        """
        environ = os.environ if environ is None else environ
        path = config_path or default_config_path(environ)

        data: dict = {}
        if config_path is not None or path.exists():
            data.update(_read_yaml(path))

        project_file = find_project_config_file(cwd or Path.cwd())
        if project_file is not None:
            data.update(_read_yaml(project_file))

        return cls.from_dict(data, environ)

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def resolve_editor(self, environ: Mapping[str, str] | None = None) -> str | None:
        """Editor command from config, else $EDITOR."""
        environ = os.environ if environ is None else environ
        return self.editor or environ.get("EDITOR")


# ============================================================
# Path Helpers
# ============================================================


def default_config_path(environ: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if environ is None else environ
    if environ.get("PRR_CONFIG"):
        return Path(environ["PRR_CONFIG"])
    config_home = environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "prr" / "config.yaml"


def default_workdir(environ: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if environ is None else environ
    data_home = environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / "prr"


def find_project_config_file(start: Path) -> Path | None:
    """Return the nearest project config file at or above start, if any."""
    for directory in (start, *start.parents):
        candidate = directory / LOCAL_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def _read_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data
