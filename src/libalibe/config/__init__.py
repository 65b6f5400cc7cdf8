"""Configuration loading."""

from libalibe.config.loader import (
    LoadedConfig,
    find_all_config_paths,
    load_config,
    load_env,
    merge_config_data,
)
from libalibe.config.schema import LibalibeConfig

__all__ = [
    "LibalibeConfig",
    "LoadedConfig",
    "find_all_config_paths",
    "load_config",
    "load_env",
    "merge_config_data",
]
