"""Tests for the shared stop token."""

from __future__ import annotations

import os
import signal
import threading

import pytest

from gvb_common.stop_token import StopToken


pytestmark = pytest.mark.unit_common


def test_request_stop_releases_waiters_and_calls_back_once() -> None:
    calls: list[str] = []
    token = StopToken(enable_signals=False, on_stop=lambda: calls.append("stop"))
    released = threading.Event()

    def waiter() -> None:
        token.wait()
        released.set()

    thread = threading.Thread(target=waiter, daemon=True)
    thread.start()
    assert token.wait(timeout=0.01) is False

    token.request_stop()
    token.request_stop()

    assert released.wait(timeout=2)
    assert token.should_stop()
    assert calls == ["stop"]


def test_failing_callback_does_not_prevent_stop() -> None:
    def boom() -> None:
        raise RuntimeError("callback failed")

    token = StopToken(enable_signals=False, on_stop=boom)
    token.request_stop()
    assert token.should_stop()


def test_sigterm_trips_token_and_restore_reinstalls_handler() -> None:
    previous = signal.getsignal(signal.SIGTERM)
    with StopToken() as token:
        assert signal.getsignal(signal.SIGTERM) != previous
        os.kill(os.getpid(), signal.SIGTERM)
        assert token.wait(timeout=2)
    assert signal.getsignal(signal.SIGTERM) == previous
