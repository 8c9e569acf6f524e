"""Volume provisioning for gce-volume-harness."""

from gvb_provisioner.api import (  # noqa: F401
    AttachmentHandle,
    GceComputeClient,
    InstanceIdentity,
    MetadataClient,
    OperationPoller,
    Volume,
    VolumeProvisioner,
)

__all__ = [
    "AttachmentHandle",
    "GceComputeClient",
    "InstanceIdentity",
    "MetadataClient",
    "OperationPoller",
    "Volume",
    "VolumeProvisioner",
]
