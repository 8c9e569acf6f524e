"""Stop token shared by the orchestrator, the poller and the device watcher."""

from __future__ import annotations

import logging
import signal
import threading
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class StopToken:
    """
    Lightweight cooperative stop controller.

    It is tripped by SIGINT/SIGTERM or by an explicit ``request_stop()``.
    Long-running loops poll ``should_stop()``; the orchestrator blocks in
    ``wait()`` until the token trips.
    """

    def __init__(
        self,
        enable_signals: bool = True,
        on_stop: Optional[Callable[[], None]] = None,
    ) -> None:
        self._on_stop = on_stop
        self._stopped = threading.Event()
        self._lock = threading.Lock()
        self._prev_handlers: Dict[int, Callable] = {}
        if enable_signals:
            self._install_signal_handlers()

    def _install_signal_handlers(self) -> None:
        """Capture SIGINT/SIGTERM and mark the token as stopped."""
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                self._prev_handlers[sig] = signal.getsignal(sig)
                signal.signal(sig, self._handle_signal)  # type: ignore[arg-type]
            except ValueError:
                # Only the main thread may install handlers.
                logger.debug("Cannot install handler for %s", sig)
                continue

    def _handle_signal(self, signum: int, frame) -> None:  # type: ignore[override]
        logger.info("Received signal %s, stopping", signal.Signals(signum).name)
        self.request_stop()

    def request_stop(self) -> None:
        """Mark the token as stopped and trigger the callback once."""
        with self._lock:
            if self._stopped.is_set():
                return
            self._stopped.set()
        if self._on_stop:
            try:
                self._on_stop()
            except Exception:
                logger.exception("Stop callback failed")

    def should_stop(self) -> bool:
        return self._stopped.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the token trips; return False on timeout."""
        return self._stopped.wait(timeout=timeout)

    def restore(self) -> None:
        """Restore original signal handlers."""
        for sig, handler in self._prev_handlers.items():
            try:
                signal.signal(sig, handler)  # type: ignore[arg-type]
            except ValueError:
                continue
        self._prev_handlers.clear()

    def __enter__(self) -> "StopToken":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.restore()
