"""Shared error taxonomy for gce-volume-harness."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class GVBError(Exception):
    """Base error type for typed failure handling."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def __str__(self) -> str:
        message = super().__str__()
        if self.__cause__ is not None:
            return f"{message}: {self.__cause__}"
        return message

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class ConfigurationError(GVBError):
    """Failure due to invalid configuration or arguments."""


class MetadataError(GVBError):
    """Failure resolving instance details from the metadata server."""


class ComputeApiError(GVBError):
    """Failure talking to the compute API or acquiring credentials for it."""


class OperationError(GVBError):
    """A remote operation could not be checked or finished with an error."""


class ProvisioningError(GVBError):
    """Volume creation failed; already created volumes are left in place."""


class WatcherError(GVBError):
    """The device directory could not be watched."""


class CommandError(GVBError):
    """An external command (format, mount) failed or could not be started."""


T = TypeVar("T", bound=GVBError)


def wrap_error(
    error_cls: type[T],
    message: str,
    *,
    context: Mapping[str, Any] | None = None,
    cause: Exception | None = None,
) -> T:
    """Create a typed GVBError with optional context and cause."""
    return error_cls(message, context=context, cause=cause)


def error_to_payload(error: GVBError) -> dict[str, Any]:
    """Convert a GVBError into flat log record fields."""
    return {
        "error_type": error.error_type,
        "error": str(error),
        "error_context": error.context,
    }
