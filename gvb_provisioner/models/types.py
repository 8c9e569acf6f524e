"""Shared provisioning types and value objects."""

from __future__ import annotations

from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Optional

DISK_NAME_PREFIX = "gvb"
STATUS_DONE = "DONE"
INTERFACE_SCSI = "SCSI"


def volume_name(run_id: str, index: int) -> str:
    """Name of the ``index``-th volume created by run ``run_id``."""
    return f"{DISK_NAME_PREFIX}-{run_id}-{index}"


@dataclass(frozen=True)
class Volume:
    """A created volume and the resource URL the compute API returned for it."""

    name: str
    url: str


@dataclass
class AttachmentHandle:
    """Waitable view of a fire-and-forget attach request."""

    volume: Volume
    future: Future

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: float | None = None) -> Optional[dict[str, Any]]:
        """Block until the request finished; ``None`` means it failed."""
        return self.future.result(timeout=timeout)

    @property
    def succeeded(self) -> bool:
        return self.future.done() and self.future.result() is not None
