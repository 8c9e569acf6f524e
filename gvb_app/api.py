"""Public application API surface."""

from gvb_app.orchestrator import Orchestrator, RunSummary
from gvb_app.settings import DEFAULT_DISK_SIZE_GB, DEFAULT_DISK_TYPE, HarnessConfig

__all__ = [
    "DEFAULT_DISK_SIZE_GB",
    "DEFAULT_DISK_TYPE",
    "HarnessConfig",
    "Orchestrator",
    "RunSummary",
]
