"""Polling of long-running zone operations."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from gvb_common.errors import OperationError, wrap_error
from gvb_common.stop_token import StopToken
from gvb_provisioner.models.types import STATUS_DONE
from gvb_provisioner.providers.gce import ComputeClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0


class OperationPoller:
    """Wait for zone operations to finish at a fixed interval.

    There is no backoff. ``timeout`` (seconds) bounds the wait when set and
    ``stop_token`` aborts it; without them the poll runs until the operation
    completes or fails.
    """

    def __init__(
        self,
        client: ComputeClient,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float | None = None,
        stop_token: StopToken | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._interval = interval
        self._timeout = timeout
        self._stop_token = stop_token
        self._sleep = sleep
        self._clock = clock

    def wait(self, name: str) -> dict[str, Any]:
        """Return the finished operation or raise OperationError."""
        deadline = None if self._timeout is None else self._clock() + self._timeout
        polls = 0
        while True:
            try:
                operation = self._client.get_zone_operation(name)
            except Exception as exc:
                raise wrap_error(
                    OperationError,
                    "cannot check operation",
                    context={"operation": name},
                    cause=exc,
                ) from exc
            polls += 1

            op_error = operation.get("error")
            if op_error:
                if isinstance(op_error, dict):
                    op_error = op_error.get("errors", op_error)
                raise OperationError(
                    "error waiting for operation",
                    context={"operation": name, "errors": op_error},
                )
            if operation.get("status") == STATUS_DONE:
                logger.debug("Operation %s done after %d polls", name, polls)
                return operation

            if deadline is not None and self._clock() >= deadline:
                raise OperationError(
                    "timed out waiting for operation",
                    context={"operation": name, "timeout": self._timeout, "polls": polls},
                )
            if self._stop_token is not None and self._stop_token.should_stop():
                raise OperationError(
                    "stopped while waiting for operation", context={"operation": name}
                )
            self._sleep(self._interval)
