"""Thin Compute Engine API client used by the provisioner."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import google.auth
import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient import discovery
from googleapiclient.errors import HttpError

from gvb_common.errors import ComputeApiError

logger = logging.getLogger(__name__)

COMPUTE_SCOPES = (
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/compute",
)
COMPUTE_BASE_URL = "https://www.googleapis.com/compute/v1"

_CLIENT_ERRORS = (HttpError, httplib2.HttpLib2Error, GoogleAuthError, OSError)


def disk_type_url(project: str, zone: str, disk_type: str) -> str:
    return f"{COMPUTE_BASE_URL}/projects/{project}/zones/{zone}/diskTypes/{disk_type}"


class ComputeClient(Protocol):
    """Subset of the compute API the provisioner depends on."""

    def insert_disk(self, name: str, size_gb: int, disk_type: str) -> dict[str, Any]:
        ...

    def get_zone_operation(self, name: str) -> dict[str, Any]:
        ...

    def attach_disk(
        self, instance: str, source: str, device_name: str, interface: str
    ) -> dict[str, Any]:
        ...


class GceComputeClient:
    """Compute API client bound to one project and zone.

    Every request runs on its own authorized ``httplib2.Http`` because the
    transport is not thread-safe and attach requests are issued concurrently.
    """

    def __init__(self, project: str, zone: str, service: Any, credentials: Any = None):
        self.project = project
        self.zone = zone
        self._service = service
        self._credentials = credentials

    @classmethod
    def from_default_credentials(cls, project: str, zone: str) -> "GceComputeClient":
        """Build a client from application default credentials."""
        try:
            credentials, _ = google.auth.default(scopes=list(COMPUTE_SCOPES))
        except GoogleAuthError as exc:
            raise ComputeApiError("cannot create oauth2 client", cause=exc) from exc
        try:
            service = discovery.build(
                "compute", "v1", credentials=credentials, cache_discovery=False
            )
        except _CLIENT_ERRORS as exc:
            raise ComputeApiError("cannot create GCE service client", cause=exc) from exc
        return cls(project, zone, service, credentials=credentials)

    def insert_disk(self, name: str, size_gb: int, disk_type: str) -> dict[str, Any]:
        body = {
            "name": name,
            "sizeGb": size_gb,
            "type": disk_type_url(self.project, self.zone, disk_type),
        }
        logger.debug("Inserting disk %s (%s GB, %s)", name, size_gb, disk_type)
        return self._execute(
            self._service.disks().insert(project=self.project, zone=self.zone, body=body),
            f"cannot insert disk {name}",
        )

    def get_zone_operation(self, name: str) -> dict[str, Any]:
        return self._execute(
            self._service.zoneOperations().get(
                project=self.project, zone=self.zone, operation=name
            ),
            f"cannot get operation {name}",
        )

    def attach_disk(
        self, instance: str, source: str, device_name: str, interface: str
    ) -> dict[str, Any]:
        body = {"source": source, "deviceName": device_name, "interface": interface}
        return self._execute(
            self._service.instances().attachDisk(
                project=self.project, zone=self.zone, instance=instance, body=body
            ),
            f"cannot attach disk {device_name} to {instance}",
        )

    def _execute(self, api_request: Any, message: str) -> dict[str, Any]:
        try:
            if self._credentials is None:
                return api_request.execute()
            http = google_auth_httplib2.AuthorizedHttp(
                self._credentials, http=httplib2.Http()
            )
            return api_request.execute(http=http)
        except _CLIENT_ERRORS as exc:
            raise ComputeApiError(
                message,
                context={"project": self.project, "zone": self.zone},
                cause=exc,
            ) from exc
