"""
Command-line interface for gce-volume-harness.

Creates and attaches GCE persistent disks to this instance while formatting
and mounting every new device that shows up, to reproduce attach/format
races on GCE nodes. Runs until SIGINT or SIGTERM.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from gvb_app.orchestrator import Orchestrator
from gvb_app.settings import DEFAULT_DISK_SIZE_GB, DEFAULT_DISK_TYPE, HarnessConfig
from gvb_common.errors import (
    ComputeApiError,
    ConfigurationError,
    GVBError,
    MetadataError,
    ProvisioningError,
    WatcherError,
    error_to_payload,
)
from gvb_common.logging import configure_logging
from gvb_common.run_info import RunInfo, generate_run_id
from gvb_common.stop_token import StopToken
from gvb_provisioner.engine.operations import DEFAULT_POLL_INTERVAL
from gvb_provisioner.providers.gce import GceComputeClient
from gvb_provisioner.providers.metadata import MetadataClient
from gvb_watcher.watcher import DEFAULT_DISK_PATH, DEFAULT_MOUNT_ROOT

logger = logging.getLogger(__name__)
console = Console(stderr=True)

app = typer.Typer(
    help="Attempts to replicate a possible GCE local-ssd bug.",
    add_completion=False,
)


def _fatal(message: str, exc: Exception) -> NoReturn:
    payload = error_to_payload(exc) if isinstance(exc, GVBError) else {"error": str(exc)}
    logger.error(message, extra=payload)
    console.print(f"{message}: {exc}", style="red", markup=False, highlight=False)
    raise typer.Exit(1)


@app.command()
def run(
    disks: int = typer.Argument(
        0, envvar="GVB_DISKS", help="Number of disks to create and attach."
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d", envvar="GVB_DEBUG", help="Run with debug logging."
    ),
    use_systemd: bool = typer.Option(
        False, "--use-systemd", envvar="GVB_USE_SYSTEMD", help="Run mount via systemd-run."
    ),
    disk_path: Path = typer.Option(
        DEFAULT_DISK_PATH,
        "--disk-path",
        envvar="GVB_DISK_PATH",
        help="Path under which new disk devices are created.",
    ),
    disk_type: str = typer.Option(
        DEFAULT_DISK_TYPE,
        "--disk-type",
        envvar="GVB_DISK_TYPE",
        help="Type of disk (pd-standard, pd-ssd).",
    ),
    disk_size: int = typer.Option(
        DEFAULT_DISK_SIZE_GB,
        "--disk-size",
        envvar="GVB_DISK_SIZE",
        help="Size of disks to create in GB.",
    ),
    mount_root: Path = typer.Option(
        DEFAULT_MOUNT_ROOT,
        "--mount-root",
        envvar="GVB_MOUNT_ROOT",
        help="Directory under which new disks are mounted.",
    ),
    poll_interval: float = typer.Option(
        DEFAULT_POLL_INTERVAL,
        "--poll-interval",
        envvar="GVB_POLL_INTERVAL",
        help="Seconds between remote operation polls.",
    ),
    operation_timeout: Optional[float] = typer.Option(
        None,
        "--operation-timeout",
        envvar="GVB_OPERATION_TIMEOUT",
        help="Give up on a remote operation after this many seconds (default: wait forever).",
    ),
    log_json: bool = typer.Option(
        False, "--log-json", envvar="GVB_LOG_JSON", help="Emit JSON log lines."
    ),
) -> None:
    """Create DISKS disks, attach them, and mount whatever appears until interrupted."""
    configure_logging(debug=debug, json=log_json or None, force=True)

    try:
        config = HarnessConfig.build(
            disks=disks,
            disk_type=disk_type,
            disk_size_gb=disk_size,
            disk_path=disk_path,
            mount_root=mount_root,
            use_systemd=use_systemd,
            poll_interval=poll_interval,
            operation_timeout=operation_timeout,
        )
    except ConfigurationError as exc:
        _fatal("invalid arguments", exc)

    try:
        identity = MetadataClient().identity()
    except MetadataError as exc:
        _fatal("cannot resolve this GCE instance", exc)

    try:
        compute = GceComputeClient.from_default_credentials(identity.project, identity.zone)
    except ComputeApiError as exc:
        _fatal("cannot create GCE service client", exc)

    run_info = RunInfo(
        run_id=generate_run_id(),
        project=identity.project,
        zone=identity.zone,
        instance=identity.instance,
    )

    with StopToken() as stop_token:
        orchestrator = Orchestrator(config, compute, run_info, stop_token)
        try:
            orchestrator.run()
        except WatcherError as exc:
            _fatal("cannot mount GCE disks", exc)
        except (ProvisioningError, ConfigurationError) as exc:
            _fatal("cannot create GCE disks", exc)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
