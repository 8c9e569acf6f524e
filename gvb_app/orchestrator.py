"""Wire the watcher and the provisioner together for one run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

import structlog

from gvb_common.run_info import RunInfo
from gvb_common.stop_token import StopToken
from gvb_provisioner.engine.operations import OperationPoller
from gvb_provisioner.engine.service import VolumeProvisioner
from gvb_provisioner.models.types import AttachmentHandle, Volume
from gvb_provisioner.providers.gce import ComputeClient
from gvb_watcher.watcher import DeviceWatcher

from .settings import HarnessConfig

logger = logging.getLogger(__name__)

_STOP_WAIT_SECONDS = 1.0


class Watcher(Protocol):
    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


@dataclass
class RunSummary:
    """What a run created and the handles of its attach requests."""

    run_info: RunInfo
    volumes: List[Volume] = field(default_factory=list)
    attachments: List[AttachmentHandle] = field(default_factory=list)


class Orchestrator:
    """Start the watcher, provision volumes, then idle until told to stop."""

    def __init__(
        self,
        config: HarnessConfig,
        compute: ComputeClient,
        run_info: RunInfo,
        stop_token: StopToken,
        watcher: Optional[Watcher] = None,
        provisioner: Optional[VolumeProvisioner] = None,
    ) -> None:
        self.config = config
        self.run_info = run_info
        self._stop_token = stop_token
        self._watcher = watcher or DeviceWatcher(
            config.disk_path,
            mount_root=config.mount_root,
            use_systemd=config.use_systemd,
            stop_token=stop_token,
        )
        self._provisioner = provisioner or VolumeProvisioner(
            compute,
            run_info.run_id,
            poller=OperationPoller(
                compute,
                interval=config.poll_interval,
                timeout=config.operation_timeout,
                stop_token=stop_token,
            ),
        )

    def run(self) -> RunSummary:
        """Execute the run; provisioning errors propagate after the watcher stops."""
        structlog.contextvars.bind_contextvars(id=self.run_info.run_id)
        logger.info(
            "Starting run",
            extra={
                "project": self.run_info.project,
                "zone": self.run_info.zone,
                "instance": self.run_info.instance,
            },
        )
        summary = RunSummary(run_info=self.run_info)

        # Subscribe before anything is created so no device event is missed.
        self._watcher.start()
        try:
            summary.volumes = self._provisioner.create_volumes(
                self.config.disks, self.config.disk_type, self.config.disk_size_gb
            )
            summary.attachments = self._provisioner.attach_volumes(
                self.run_info.instance, summary.volumes
            )
            logger.info("Waiting for termination signal")
            while not self._stop_token.wait(timeout=_STOP_WAIT_SECONDS):
                pass
            logger.info("Stopping run")
        finally:
            self._watcher.stop()
        return summary
