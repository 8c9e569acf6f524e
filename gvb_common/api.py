"""Public API surface for gvb_common."""

from gvb_common.errors import (
    CommandError,
    ComputeApiError,
    ConfigurationError,
    GVBError,
    MetadataError,
    OperationError,
    ProvisioningError,
    WatcherError,
    error_to_payload,
    wrap_error,
)
from gvb_common.logging import configure_logging
from gvb_common.run_info import RunInfo, generate_run_id
from gvb_common.stop_token import StopToken

__all__ = [
    "CommandError",
    "ComputeApiError",
    "ConfigurationError",
    "GVBError",
    "MetadataError",
    "OperationError",
    "ProvisioningError",
    "RunInfo",
    "StopToken",
    "WatcherError",
    "configure_logging",
    "error_to_payload",
    "generate_run_id",
    "wrap_error",
]
