"""Format and mount command lines, and how they are executed."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Sequence

from gvb_common.errors import CommandError

logger = logging.getLogger(__name__)

FILESYSTEM_TYPE = "ext4"
FORMATTER = f"mkfs.{FILESYSTEM_TYPE}"
FORMAT_FLAGS = ("-F", "-m0")
MOUNT_OPTIONS = "rw,seclabel,relatime,data=ordered"
SCOPE_WRAPPER = ("systemd-run", "--scope", "--")

CommandRunner = Callable[[Sequence[str]], None]


def format_command(device: Path) -> List[str]:
    return [FORMATTER, *FORMAT_FLAGS, str(device)]


def mount_command(device: Path, mountpoint: Path, use_systemd: bool = False) -> List[str]:
    """Build the mount invocation, optionally inside a transient systemd scope."""
    cmd = ["mount", "-t", FILESYSTEM_TYPE, "-o", MOUNT_OPTIONS, str(device), str(mountpoint)]
    if use_systemd:
        return [*SCOPE_WRAPPER, *cmd]
    return cmd


def run_command(cmd: Sequence[str]) -> None:
    """Run ``cmd`` to completion, raising CommandError unless it exits 0."""
    logger.debug("Running %s", " ".join(cmd))
    try:
        subprocess.run(
            list(cmd),
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        raise CommandError(
            f"{cmd[0]} exited with status {exc.returncode}",
            context={
                "cmd": list(cmd),
                "returncode": exc.returncode,
                "stderr": (exc.stderr or "").strip(),
            },
            cause=exc,
        ) from exc
    except OSError as exc:
        raise CommandError(
            f"cannot run {cmd[0]}", context={"cmd": list(cmd)}, cause=exc
        ) from exc
