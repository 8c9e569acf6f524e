"""Tests for the run configuration model."""

from __future__ import annotations

from pathlib import Path

import pytest

from gvb_app.settings import HarnessConfig
from gvb_common.errors import ConfigurationError


pytestmark = pytest.mark.unit_app


def test_defaults_match_cli_defaults() -> None:
    config = HarnessConfig()

    assert config.disks == 0
    assert config.disk_type == "pd-standard"
    assert config.disk_size_gb == 128
    assert config.disk_path == Path("/dev/disk/by-id")
    assert config.mount_root == Path("/mnt")
    assert config.use_systemd is False
    assert config.poll_interval == 1.0
    assert config.operation_timeout is None


def test_build_strips_disk_type() -> None:
    assert HarnessConfig.build(disk_type="  pd-ssd ").disk_type == "pd-ssd"


@pytest.mark.parametrize(
    "values,field",
    [
        ({"disks": -1}, "disks"),
        ({"disk_size_gb": 0}, "disk_size_gb"),
        ({"disk_type": ""}, "disk_type"),
        ({"disk_type": "   "}, "disk_type"),
        ({"poll_interval": 0}, "poll_interval"),
        ({"operation_timeout": -5}, "operation_timeout"),
    ],
)
def test_build_rejects_invalid_values(values, field) -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        HarnessConfig.build(**values)

    problems = excinfo.value.context["problems"]
    assert any(problem.startswith(f"{field}:") for problem in problems)
