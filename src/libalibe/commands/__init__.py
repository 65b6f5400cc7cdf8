"""libalibe commands."""

from libalibe.commands.base import Command, CommandContext, MemoryLog, SyncCommand
from libalibe.commands.check import (
    CheckCommand,
    CheckOptions,
    CheckResult,
    check_packages,
    handle_check,
)
from libalibe.commands.edit import edit_configs, handle_edit
from libalibe.commands.fixlink import (
    FixlinkCommand,
    FixlinkOptions,
    FixlinkResult,
    fix_links,
    handle_fixlink,
)
from libalibe.commands.install import (
    InstallCommand,
    InstallOptions,
    InstallResult,
    handle_install,
    install_packages,
)
from libalibe.commands.link import (
    LinkCommand,
    LinkOptions,
    LinkResult,
    UnlinkCommand,
    handle_link,
    handle_unlink,
    link_packages,
    unlink_packages,
)
from libalibe.commands.list import (
    ListCommand,
    ListFormat,
    ListOptions,
    ListResult,
    PackageInfo,
    handle_list_command,
    list_packages,
)
from libalibe.commands.publish import (
    PackageRelease,
    PublishCommand,
    PublishOptions,
    PublishResult,
    ReleaseCommand,
    ReleaseOptions,
    ReleaseResult,
    handle_publish,
    handle_release,
    publish_package,
    release,
)
from libalibe.commands.pull import PullCommand, PullResult, handle_pull, pull_packages
from libalibe.commands.run import RunCommand, RunOptions, handle_run_script, run_script
from libalibe.commands.watch import WatchCommand, WatchOptions, handle_watch, watch_packages

__all__ = [
    # Base
    "Command",
    "SyncCommand",
    "CommandContext",
    "MemoryLog",
    # Link
    "LinkCommand",
    "LinkOptions",
    "LinkResult",
    "UnlinkCommand",
    "link_packages",
    "unlink_packages",
    "handle_link",
    "handle_unlink",
    # Install
    "InstallCommand",
    "InstallOptions",
    "InstallResult",
    "install_packages",
    "handle_install",
    # Run
    "RunCommand",
    "RunOptions",
    "run_script",
    "handle_run_script",
    # Check
    "CheckCommand",
    "CheckOptions",
    "CheckResult",
    "check_packages",
    "handle_check",
    # List
    "ListCommand",
    "ListOptions",
    "ListResult",
    "ListFormat",
    "PackageInfo",
    "list_packages",
    "handle_list_command",
    # Publish
    "PublishCommand",
    "PublishOptions",
    "PublishResult",
    "publish_package",
    "handle_publish",
    "ReleaseCommand",
    "ReleaseOptions",
    "ReleaseResult",
    "PackageRelease",
    "release",
    "handle_release",
    # Pull
    "PullCommand",
    "PullResult",
    "pull_packages",
    "handle_pull",
    # Watch
    "WatchCommand",
    "WatchOptions",
    "watch_packages",
    "handle_watch",
    # Fixlink
    "FixlinkCommand",
    "FixlinkOptions",
    "FixlinkResult",
    "fix_links",
    "handle_fixlink",
    # Edit
    "edit_configs",
    "handle_edit",
]
