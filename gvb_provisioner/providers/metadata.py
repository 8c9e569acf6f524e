"""Compute Engine metadata server lookups for the current instance."""

from __future__ import annotations

from dataclasses import dataclass
from urllib import error, parse, request

from gvb_common.errors import MetadataError

METADATA_URL = "http://metadata.google.internal/computeMetadata/v1"
METADATA_HEADERS = {"Metadata-Flavor": "Google"}


@dataclass(frozen=True)
class InstanceIdentity:
    """Project, zone and name of the instance the harness runs on."""

    project: str
    zone: str
    instance: str


@dataclass
class MetadataClient:
    """Minimal client for the instance metadata endpoint."""

    base_url: str = METADATA_URL
    timeout_seconds: float = 5.0

    def __post_init__(self) -> None:
        parsed = parse.urlparse(self.base_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"metadata base_url must be an http(s) URL, got: {self.base_url}")
        self.base_url = self.base_url.rstrip("/")

    def project_id(self) -> str:
        return self._get("project/project-id", "project")

    def zone(self) -> str:
        # Reported as projects/<number>/zones/<zone>.
        return self._get("instance/zone", "zone").rsplit("/", 1)[-1]

    def instance_name(self) -> str:
        return self._get("instance/name", "name")

    def identity(self) -> InstanceIdentity:
        return InstanceIdentity(
            project=self.project_id(),
            zone=self.zone(),
            instance=self.instance_name(),
        )

    def _get(self, path: str, label: str) -> str:
        url = f"{self.base_url}/{path}"
        req = request.Request(url, headers=METADATA_HEADERS, method="GET")
        try:
            with request.urlopen(req, timeout=self.timeout_seconds) as resp:  # nosec B310
                body = resp.read().decode("utf-8").strip()
        except (error.URLError, OSError) as exc:
            raise MetadataError(
                f"cannot determine this GCE instance's {label} via the metadata endpoint",
                context={"url": url},
                cause=exc,
            ) from exc
        if not body:
            raise MetadataError(
                f"metadata endpoint returned an empty {label}", context={"url": url}
            )
        return body
