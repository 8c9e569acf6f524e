"""Run configuration for the harness."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gvb_common.errors import ConfigurationError
from gvb_provisioner.engine.operations import DEFAULT_POLL_INTERVAL
from gvb_watcher.watcher import DEFAULT_DISK_PATH, DEFAULT_MOUNT_ROOT

DEFAULT_DISK_TYPE = "pd-standard"
DEFAULT_DISK_SIZE_GB = 128


class HarnessConfig(BaseModel):
    """Everything a single run needs besides credentials and instance identity."""

    model_config = ConfigDict(frozen=True)

    disks: int = Field(default=0, ge=0, description="Number of disks to create and attach")
    disk_type: str = Field(
        default=DEFAULT_DISK_TYPE, min_length=1, description="Type of disk (pd-standard, pd-ssd)"
    )
    disk_size_gb: int = Field(
        default=DEFAULT_DISK_SIZE_GB, gt=0, description="Size of disks to create in GB"
    )
    disk_path: Path = Field(
        default=DEFAULT_DISK_PATH, description="Path under which new disk devices are created"
    )
    mount_root: Path = Field(
        default=DEFAULT_MOUNT_ROOT, description="Directory under which disks are mounted"
    )
    use_systemd: bool = Field(default=False, description="Run mount via systemd-run")
    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between operation polls"
    )
    operation_timeout: Optional[float] = Field(
        default=None, gt=0, description="Give up on a remote operation after this many seconds"
    )

    @field_validator("disk_type")
    @classmethod
    def _strip_disk_type(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("disk type must not be blank")
        return value

    @classmethod
    def build(cls, **values: Any) -> "HarnessConfig":
        """Validate ``values``, raising ConfigurationError instead of ValidationError."""
        try:
            return cls(**values)
        except ValidationError as exc:
            problems = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in exc.errors()
            ]
            raise ConfigurationError(
                "invalid configuration", context={"problems": problems}, cause=exc
            ) from exc
