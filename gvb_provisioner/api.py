"""Public provisioning API surface."""

from gvb_provisioner.engine.operations import DEFAULT_POLL_INTERVAL, OperationPoller
from gvb_provisioner.engine.service import VolumeProvisioner
from gvb_provisioner.models.types import (
    INTERFACE_SCSI,
    STATUS_DONE,
    AttachmentHandle,
    Volume,
    volume_name,
)
from gvb_provisioner.providers.gce import ComputeClient, GceComputeClient, disk_type_url
from gvb_provisioner.providers.metadata import InstanceIdentity, MetadataClient

__all__ = [
    "AttachmentHandle",
    "ComputeClient",
    "DEFAULT_POLL_INTERVAL",
    "GceComputeClient",
    "INTERFACE_SCSI",
    "InstanceIdentity",
    "MetadataClient",
    "OperationPoller",
    "STATUS_DONE",
    "Volume",
    "VolumeProvisioner",
    "disk_type_url",
    "volume_name",
]
