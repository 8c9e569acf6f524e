"""Tests for format/mount command construction and execution."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from gvb_common.errors import CommandError
from gvb_watcher.commands import format_command, mount_command, run_command


pytestmark = pytest.mark.unit_watcher


def test_format_command_uses_fixed_flags() -> None:
    assert format_command(Path("/dev/disk/by-id/google-gvb-abcd-0")) == [
        "mkfs.ext4",
        "-F",
        "-m0",
        "/dev/disk/by-id/google-gvb-abcd-0",
    ]


def test_mount_command_plain_and_scoped() -> None:
    plain = mount_command(Path("/dev/sdb"), Path("/mnt/sdb"))
    assert plain == [
        "mount",
        "-t",
        "ext4",
        "-o",
        "rw,seclabel,relatime,data=ordered",
        "/dev/sdb",
        "/mnt/sdb",
    ]
    scoped = mount_command(Path("/dev/sdb"), Path("/mnt/sdb"), use_systemd=True)
    assert scoped == ["systemd-run", "--scope", "--", *plain]


def test_run_command_succeeds_on_zero_exit() -> None:
    run_command([sys.executable, "-c", "pass"])


def test_run_command_reports_exit_status_and_stderr() -> None:
    cmd = [sys.executable, "-c", "import sys; sys.stderr.write('bad superblock'); sys.exit(3)"]

    with pytest.raises(CommandError) as excinfo:
        run_command(cmd)

    assert excinfo.value.context["returncode"] == 3
    assert excinfo.value.context["stderr"] == "bad superblock"
    assert excinfo.value.context["cmd"] == cmd


def test_run_command_wraps_missing_binary(tmp_path: Path) -> None:
    missing = str(tmp_path / "mkfs.nothing")

    with pytest.raises(CommandError, match="cannot run"):
        run_command([missing, "/dev/null"])
