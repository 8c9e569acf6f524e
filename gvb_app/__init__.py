"""Application layer: configuration and run orchestration."""

from gvb_app.api import HarnessConfig, Orchestrator, RunSummary  # noqa: F401

__all__ = ["HarnessConfig", "Orchestrator", "RunSummary"]
