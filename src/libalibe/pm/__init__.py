"""Package manager integration."""

from libalibe.pm.client import (
    BumpType,
    bump_version,
    install_latest,
    link_global,
    list_dependency_path,
    parse_dependency_path,
    publish,
    run_pm,
    unlink,
    view_field,
)

__all__ = [
    "BumpType",
    "bump_version",
    "install_latest",
    "link_global",
    "list_dependency_path",
    "parse_dependency_path",
    "publish",
    "run_pm",
    "unlink",
    "view_field",
]
