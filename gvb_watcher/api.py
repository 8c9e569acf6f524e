"""Public device watcher API surface."""

from gvb_watcher.commands import (
    FILESYSTEM_TYPE,
    FORMAT_FLAGS,
    MOUNT_OPTIONS,
    CommandRunner,
    format_command,
    mount_command,
    run_command,
)
from gvb_watcher.seen import SeenSet
from gvb_watcher.watcher import (
    DEFAULT_DISK_PATH,
    DEFAULT_MOUNT_ROOT,
    DeviceEvent,
    DeviceOutcome,
    DeviceWatcher,
)

__all__ = [
    "CommandRunner",
    "DEFAULT_DISK_PATH",
    "DEFAULT_MOUNT_ROOT",
    "DeviceEvent",
    "DeviceOutcome",
    "DeviceWatcher",
    "FILESYSTEM_TYPE",
    "FORMAT_FLAGS",
    "MOUNT_OPTIONS",
    "SeenSet",
    "format_command",
    "mount_command",
    "run_command",
]
