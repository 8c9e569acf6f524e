"""Watch a device directory and format/mount new devices the way a kubelet would."""

from __future__ import annotations

import logging
import os
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from gvb_common.errors import CommandError, WatcherError
from gvb_common.stop_token import StopToken
from gvb_watcher.commands import CommandRunner, format_command, mount_command, run_command
from gvb_watcher.seen import SeenSet

logger = logging.getLogger(__name__)

DEFAULT_DISK_PATH = Path("/dev/disk/by-id")
DEFAULT_MOUNT_ROOT = Path("/mnt")
MOUNTPOINT_MODE = 0o700
UDEV_TEMP_PREFIX = ".#"
_QUEUE_POLL_SECONDS = 0.5


class DeviceOutcome(str, Enum):
    """How processing of a single device event ended."""

    MOUNTED = "mounted"
    SKIPPED = "skipped"
    MOUNTPOINT_FAILED = "mountpoint_failed"
    FORMAT_FAILED = "format_failed"
    MOUNT_FAILED = "mount_failed"


@dataclass(frozen=True)
class DeviceEvent:
    """A device node that appeared under the watched directory."""

    path: Path


class DeviceEventHandler(FileSystemEventHandler):
    """Forward device nodes that appear in the directory to the watcher queue.

    udev publishes by-id links by writing a ``.#``-prefixed temporary link and
    renaming it into place, so the rename target counts as a new device and
    the temporary name is ignored.
    """

    def __init__(self, enqueue: Callable[[DeviceEvent], None]) -> None:
        super().__init__()
        self._enqueue = enqueue

    def on_created(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event.src_path, event.is_directory)

    def on_moved(self, event: FileSystemEvent) -> None:
        self._maybe_enqueue(event.dest_path, event.is_directory)

    def _maybe_enqueue(self, raw_path: str | bytes, is_directory: bool) -> None:
        if is_directory or not raw_path:
            return
        path = Path(os.fsdecode(raw_path))
        if path.name.startswith(UDEV_TEMP_PREFIX):
            logger.debug("Ignoring temporary udev link", extra={"disk": str(path)})
            return
        self._enqueue(DeviceEvent(path=path))


class DeviceWatcher:
    """Format and mount every device that appears under ``path``, once.

    Events are consumed one at a time by a dispatch thread and processed on
    a worker pool, so a slow ``mkfs`` never delays receipt of the next event.
    Each canonical device target is claimed in a shared SeenSet before any
    side effect; a device whose processing fails is not retried.
    """

    def __init__(
        self,
        path: Path = DEFAULT_DISK_PATH,
        *,
        mount_root: Path = DEFAULT_MOUNT_ROOT,
        use_systemd: bool = False,
        runner: CommandRunner = run_command,
        stop_token: StopToken | None = None,
        seen: SeenSet | None = None,
        observer_factory: Callable[[], Any] = Observer,
        max_workers: int | None = None,
    ) -> None:
        self.path = Path(path)
        self.mount_root = Path(mount_root)
        self.use_systemd = use_systemd
        self.seen = seen if seen is not None else SeenSet()
        self._runner = runner
        self._stop_token = stop_token
        self._observer_factory = observer_factory
        self._max_workers = max_workers
        self._events: queue.Queue[Optional[DeviceEvent]] = queue.Queue()
        self._stopped = threading.Event()
        self._observer: Any = None
        self._dispatcher: threading.Thread | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._observer_lost = False

    @property
    def running(self) -> bool:
        return self._dispatcher is not None and self._dispatcher.is_alive()

    def start(self) -> None:
        """Subscribe to the directory; events are delivered once this returns."""
        if self.running:
            return
        logger.info("Watching for new disks to mount", extra={"path": str(self.path)})
        self._stopped.clear()
        self._events = queue.Queue()
        self._executor = ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="gvb-device"
        )
        observer = self._observer_factory()
        try:
            observer.schedule(
                DeviceEventHandler(self._events.put), str(self.path), recursive=False
            )
            observer.start()
        except (OSError, RuntimeError) as exc:
            self._executor.shutdown(wait=False)
            self._executor = None
            raise WatcherError(
                f"cannot watch {self.path} for new disks",
                context={"path": self.path},
                cause=exc,
            ) from exc
        self._observer = observer
        self._dispatcher = threading.Thread(
            target=self._dispatch_loop, name="gvb-device-watcher", daemon=True
        )
        self._dispatcher.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Tear down the subscription; running format/mount commands are left alone."""
        self._stopped.set()
        self._events.put(None)
        if self._observer is not None:
            try:
                self._observer.stop()
                self._observer.join(timeout=timeout)
            except RuntimeError:
                logger.debug("Observer was not running")
            self._observer = None
        if self._dispatcher is not None:
            self._dispatcher.join(timeout=timeout)
            self._dispatcher = None
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def submit(self, path: Path) -> None:
        """Queue ``path`` as if the subscription reported it."""
        self._events.put(DeviceEvent(path=Path(path)))

    def __enter__(self) -> "DeviceWatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _should_stop(self) -> bool:
        if self._stopped.is_set():
            return True
        return self._stop_token is not None and self._stop_token.should_stop()

    def _dispatch_loop(self) -> None:
        while not self._should_stop():
            try:
                event = self._events.get(timeout=_QUEUE_POLL_SECONDS)
            except queue.Empty:
                self._check_observer()
                continue
            if event is None:
                break
            try:
                self._dispatch(event)
            except Exception:
                logger.exception("Error watching disks")

    def _dispatch(self, event: DeviceEvent) -> Future:
        if self._executor is None:
            raise WatcherError("device watcher is not running")
        return self._executor.submit(self._process_safely, event.path)

    def _check_observer(self) -> None:
        observer = self._observer
        if observer is None or self._observer_lost or observer.is_alive():
            return
        self._observer_lost = True
        logger.error(
            "Error watching disks: event subscription stopped unexpectedly",
            extra={"path": str(self.path)},
        )

    def _process_safely(self, path: Path) -> DeviceOutcome | None:
        try:
            return self.process_device(path)
        except Exception:
            logger.exception("Unexpected error processing disk %s", path)
            return None

    def process_device(self, path: Path) -> DeviceOutcome:
        """Claim, format and mount the device at ``path``.

        Mount point, format and mount all act on the event path itself; the
        resolved target only decides whether the device was seen before.
        """
        path = Path(path)
        mountpoint = self.mount_root / path.name
        fields = {"disk": str(path), "mountpoint": str(mountpoint)}

        try:
            target = str(path.resolve(strict=True))
        except (OSError, RuntimeError) as exc:
            logging.LoggerAdapter(logger, fields).info(
                "Cannot determine symlink target: %s", exc
            )
            target = str(path)
        log = logging.LoggerAdapter(logger, {**fields, "target": target})

        log.info("New disk detected")
        if not self.seen.claim(target):
            log.info("Ignoring previously processed disk")
            return DeviceOutcome.SKIPPED

        try:
            mountpoint.mkdir(mode=MOUNTPOINT_MODE)
        except OSError as exc:
            log.error("Error creating mountpath: %s", exc)
            return DeviceOutcome.MOUNTPOINT_FAILED
        log.info("Created mountpath")

        fmtcmd = format_command(path)
        try:
            self._runner(fmtcmd)
        except CommandError as exc:
            log.error("Error formatting disk: %s (cmd: %s)", exc, " ".join(fmtcmd))
            return DeviceOutcome.FORMAT_FAILED
        log.info("Formatted disk")

        mntcmd = mount_command(path, mountpoint, use_systemd=self.use_systemd)
        try:
            self._runner(mntcmd)
        except CommandError as exc:
            log.error("Error mounting disk: %s (cmd: %s)", exc, " ".join(mntcmd))
            return DeviceOutcome.MOUNT_FAILED
        log.info("Mounted disk")
        return DeviceOutcome.MOUNTED
