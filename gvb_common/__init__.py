"""Shared helpers for gce-volume-harness."""

from gvb_common.api import GVBError, RunInfo, configure_logging, generate_run_id

__all__ = ["configure_logging", "generate_run_id", "GVBError", "RunInfo"]
