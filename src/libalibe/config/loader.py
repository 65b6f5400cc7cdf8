"""Configuration discovery, loading and merging."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from libalibe.config.schema import LibalibeConfig
from libalibe.errors import ConfigurationError

CONFIG_FILE_PATTERN = re.compile(r"^libalibe(\..+)?\.(yml|yaml|json)$")
ENV_FILE_NAME = ".env.libalibe"
CONFIG_PATH_ENV_VAR = "LIBALIBE_CONFIG_PATH"
ENV_MODE_VAR = "LIBALIBE_ENV"

_LIST_KEYS = ("include", "exclude")
_SCALAR_KEYS = ("branch", "remote", "commit_message", "package_manager")


@dataclass
class LoadedConfig:
    """A merged configuration together with the files it came from."""

    config: LibalibeConfig
    paths: list[Path]

    @property
    def root(self) -> Path:
        """Directory of the nearest config file."""
        return self.paths[0].parent


def _walk_up(start: Path) -> list[Path]:
    directory = start.resolve()
    dirs = [directory]
    while directory.parent != directory:
        directory = directory.parent
        dirs.append(directory)
    return dirs


def find_config_in_dir(directory: Path) -> Path | None:
    """Return the first config file in a directory, if any."""
    try:
        candidates = sorted(
            p for p in directory.iterdir() if p.is_file() and CONFIG_FILE_PATTERN.match(p.name)
        )
    except OSError:
        return None
    return candidates[0] if candidates else None


def find_all_config_paths(start: Path | None = None) -> list[Path]:
    """Collect config files from ``start`` up to the filesystem root.

    The nearest file comes first. A file named by ``LIBALIBE_CONFIG_PATH`` is
    appended last when it is not already collected.

    Args:
        start: Directory to start from (defaults to cwd).

    Returns:
        List of config file paths.
    """
    start = start or Path.cwd()
    paths = [p for d in _walk_up(start) if (p := find_config_in_dir(d)) is not None]

    extra = os.environ.get(CONFIG_PATH_ENV_VAR)
    if extra:
        extra_path = Path(extra).expanduser().resolve()
        if not extra_path.is_file():
            raise ConfigurationError(f"{CONFIG_PATH_ENV_VAR} does not point to a file", extra_path)
        if extra_path not in paths:
            paths.append(extra_path)

    return paths


def load_env(start: Path | None = None) -> Path | None:
    """Load the nearest ``.env.libalibe`` file into the environment.

    Args:
        start: Directory to start searching from.

    Returns:
        Path of the loaded env file or None.
    """
    for directory in _walk_up(start or Path.cwd()):
        env_path = directory / ENV_FILE_NAME
        if env_path.is_file():
            load_dotenv(env_path, override=True)
            mode = os.environ.get(ENV_MODE_VAR)
            if mode:
                load_dotenv(env_path.with_name(f"{ENV_FILE_NAME}.{mode}"), override=True)
            return env_path
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a single config file.

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot parse config file: {e}", path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a mapping", path)
    return data


def _resolve_item_path(value: Any, base: Path, config_path: Path) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigurationError(f"Invalid item path: {value!r}", config_path)
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = base / path
    return str(path.resolve())


def merge_config_data(files: list[tuple[Path, dict[str, Any]]]) -> dict[str, Any]:
    """Merge raw config mappings, nearest file first.

    ``include``/``exclude`` are unioned in order, ``items`` are merged with
    later files overriding earlier ones, scalar settings keep the first value.
    """
    merged: dict[str, Any] = {"items": {}, "include": [], "exclude": []}

    for path, data in files:
        for key in _LIST_KEYS:
            values = data.get(key) or []
            if not isinstance(values, list):
                raise ConfigurationError(f'"{key}" must be a list', path)
            merged[key].extend(v for v in values if v not in merged[key])

        items = data.get("items") or {}
        if not isinstance(items, dict):
            raise ConfigurationError('"items" must be a mapping', path)
        for name, value in items.items():
            merged["items"][name] = _resolve_item_path(value, path.parent, path)

        for key in _SCALAR_KEYS:
            if key in data and key not in merged:
                merged[key] = data[key]

        unknown = set(data) - {"items", *_LIST_KEYS, *_SCALAR_KEYS}
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {', '.join(sorted(unknown))}", path)

    return merged


def load_config(start: Path | None = None) -> LoadedConfig:
    """Find, merge and validate configuration for a directory.

    Args:
        start: Directory to start from (defaults to cwd).

    Returns:
        Loaded configuration.

    Raises:
        ConfigurationError: If no config exists or it is invalid.
    """
    start = start or Path.cwd()
    load_env(start)

    paths = find_all_config_paths(start)
    if not paths:
        raise ConfigurationError("Config file not found", start)

    merged = merge_config_data([(p, read_config_file(p)) for p in paths])

    try:
        config = LibalibeConfig.model_validate(merged)
    except ValidationError as e:
        joined = ", ".join(str(p) for p in paths)
        raise ConfigurationError(f'Invalid config files: "{joined}": {e}') from e

    return LoadedConfig(config=config, paths=paths)
