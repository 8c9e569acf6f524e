"""Create volumes one by one, then attach them all at once."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Sequence

from gvb_common.errors import ConfigurationError, ProvisioningError
from gvb_provisioner.engine.operations import OperationPoller
from gvb_provisioner.models.types import (
    INTERFACE_SCSI,
    AttachmentHandle,
    Volume,
    volume_name,
)
from gvb_provisioner.providers.gce import ComputeClient

logger = logging.getLogger(__name__)


class VolumeProvisioner:
    """Provision the volumes of a single run."""

    def __init__(
        self,
        client: ComputeClient,
        run_id: str,
        poller: OperationPoller | None = None,
    ) -> None:
        self._client = client
        self._run_id = run_id
        self._poller = poller or OperationPoller(client)

    def create_volumes(self, count: int, disk_type: str, size_gb: int) -> List[Volume]:
        """Create ``count`` volumes sequentially, waiting on each operation.

        The first failure aborts the batch; volumes created before it stay
        in place.
        """
        self._validate(count, disk_type, size_gb)
        volumes: List[Volume] = []
        for index in range(count):
            name = volume_name(self._run_id, index)
            log = logging.LoggerAdapter(logger, {"disk": name, "type": disk_type})
            log.info("Creating disk")
            try:
                operation = self._client.insert_disk(name, size_gb, disk_type)
                finished = self._poller.wait(operation["name"])
            except Exception as exc:
                raise ProvisioningError(
                    f"cannot create GCE disk {name}",
                    context={"name": name, "created": [v.name for v in volumes]},
                    cause=exc,
                ) from exc
            url = operation.get("targetLink") or finished.get("targetLink", "")
            volumes.append(Volume(name=name, url=url))
            logging.LoggerAdapter(
                logger, {"disk": name, "type": disk_type, "url": url}
            ).info("Created disk")
        return volumes

    def attach_volumes(
        self, instance: str, volumes: Sequence[Volume]
    ) -> List[AttachmentHandle]:
        """Fire one attach request per volume without waiting for any of them.

        Outcomes are logged by the workers; the returned handles are only
        needed by callers that want to observe completion.
        """
        if not volumes:
            return []
        executor = ThreadPoolExecutor(
            max_workers=len(volumes), thread_name_prefix="gvb-attach"
        )
        try:
            handles = [
                AttachmentHandle(
                    volume=volume,
                    future=executor.submit(self._attach, instance, volume),
                )
                for volume in volumes
            ]
        finally:
            executor.shutdown(wait=False)
        return handles

    def _attach(self, instance: str, volume: Volume) -> Optional[dict[str, Any]]:
        log = logging.LoggerAdapter(
            logger, {"instance": instance, "url": volume.url, "disk": volume.name}
        )
        try:
            operation = self._client.attach_disk(
                instance,
                source=volume.url,
                device_name=volume.name,
                interface=INTERFACE_SCSI,
            )
        except Exception as exc:
            log.error("Disk attachment failed: %s", exc)
            return None
        log.info("Attached disk")
        return operation

    @staticmethod
    def _validate(count: int, disk_type: str, size_gb: int) -> None:
        if count < 0:
            raise ConfigurationError(
                "disk count must not be negative", context={"count": count}
            )
        if size_gb <= 0:
            raise ConfigurationError(
                "disk size must be positive", context={"size_gb": size_gb}
            )
        if not disk_type or not disk_type.strip():
            raise ConfigurationError("disk type must not be empty")
