"""Device watcher that formats and mounts newly attached disks."""

from gvb_watcher.api import DeviceOutcome, DeviceWatcher, SeenSet  # noqa: F401

__all__ = ["DeviceOutcome", "DeviceWatcher", "SeenSet"]
