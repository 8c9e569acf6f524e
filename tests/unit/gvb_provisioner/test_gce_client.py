"""Tests for the Compute Engine client wrapper."""

from __future__ import annotations

from unittest.mock import MagicMock

import httplib2
import pytest
from google.auth.exceptions import DefaultCredentialsError
from googleapiclient.errors import HttpError

from gvb_common.errors import ComputeApiError
from gvb_provisioner.providers import gce as gce_mod
from gvb_provisioner.providers.gce import GceComputeClient, disk_type_url


pytestmark = pytest.mark.unit_provisioner


@pytest.fixture
def service() -> MagicMock:
    svc = MagicMock()
    svc.disks.return_value.insert.return_value.execute.return_value = {"name": "op-insert"}
    svc.zoneOperations.return_value.get.return_value.execute.return_value = {"status": "DONE"}
    svc.instances.return_value.attachDisk.return_value.execute.return_value = {"name": "op-attach"}
    return svc


def test_disk_type_url_is_zonal() -> None:
    assert disk_type_url("proj", "us-central1-a", "pd-ssd") == (
        "https://www.googleapis.com/compute/v1/projects/proj/zones/us-central1-a/diskTypes/pd-ssd"
    )


def test_insert_disk_sends_expanded_type(service: MagicMock) -> None:
    client = GceComputeClient("proj", "zone-a", service)

    op = client.insert_disk("gvb-abcd-0", 128, "pd-standard")

    assert op == {"name": "op-insert"}
    service.disks.return_value.insert.assert_called_once_with(
        project="proj",
        zone="zone-a",
        body={
            "name": "gvb-abcd-0",
            "sizeGb": 128,
            "type": disk_type_url("proj", "zone-a", "pd-standard"),
        },
    )


def test_attach_disk_and_get_operation(service: MagicMock) -> None:
    client = GceComputeClient("proj", "zone-a", service)

    assert client.attach_disk("node-1", "https://disk", "gvb-abcd-0", "SCSI") == {
        "name": "op-attach"
    }
    service.instances.return_value.attachDisk.assert_called_once_with(
        project="proj",
        zone="zone-a",
        instance="node-1",
        body={"source": "https://disk", "deviceName": "gvb-abcd-0", "interface": "SCSI"},
    )
    assert client.get_zone_operation("op-attach") == {"status": "DONE"}
    service.zoneOperations.return_value.get.assert_called_once_with(
        project="proj", zone="zone-a", operation="op-attach"
    )


def test_each_request_gets_its_own_authorized_http(
    service: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    created: list[object] = []

    def fake_authorized_http(credentials, http=None):
        created.append((credentials, http))
        return f"http-{len(created)}"

    monkeypatch.setattr(gce_mod.google_auth_httplib2, "AuthorizedHttp", fake_authorized_http)
    credentials = object()
    client = GceComputeClient("proj", "zone-a", service, credentials=credentials)

    client.get_zone_operation("op-1")
    client.get_zone_operation("op-2")

    execute = service.zoneOperations.return_value.get.return_value.execute
    assert [c.kwargs["http"] for c in execute.call_args_list] == ["http-1", "http-2"]
    assert all(entry[0] is credentials for entry in created)


def test_http_errors_are_wrapped(service: MagicMock) -> None:
    error = HttpError(httplib2.Response({"status": 403}), b"forbidden")
    service.disks.return_value.insert.return_value.execute.side_effect = error
    client = GceComputeClient("proj", "zone-a", service)

    with pytest.raises(ComputeApiError, match="cannot insert disk gvb-abcd-0") as excinfo:
        client.insert_disk("gvb-abcd-0", 10, "pd-ssd")

    assert excinfo.value.__cause__ is error
    assert excinfo.value.context == {"project": "proj", "zone": "zone-a"}


def test_missing_default_credentials_are_fatal(monkeypatch: pytest.MonkeyPatch) -> None:
    def no_credentials(scopes=None):
        raise DefaultCredentialsError("no credentials")

    monkeypatch.setattr(gce_mod.google.auth, "default", no_credentials)

    with pytest.raises(ComputeApiError, match="cannot create oauth2 client"):
        GceComputeClient.from_default_credentials("proj", "zone-a")


def test_from_default_credentials_builds_compute_v1(monkeypatch: pytest.MonkeyPatch) -> None:
    credentials = object()
    build = MagicMock(return_value="service")
    monkeypatch.setattr(gce_mod.google.auth, "default", lambda scopes=None: (credentials, "proj"))
    monkeypatch.setattr(gce_mod.discovery, "build", build)

    client = GceComputeClient.from_default_credentials("proj", "zone-a")

    build.assert_called_once_with(
        "compute", "v1", credentials=credentials, cache_discovery=False
    )
    assert (client.project, client.zone) == ("proj", "zone-a")
