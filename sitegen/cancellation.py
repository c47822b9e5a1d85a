"""Cooperative cancellation shared between a build and its caller."""

from __future__ import annotations

import threading

from .errors import BuildCancelledError


class CancellationToken:
    """Flag polled between units of work; never interrupts work in flight."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def throw_if_cancelled(self) -> None:
        if self._event.is_set():
            raise BuildCancelledError()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; return True once cancelled."""
        return self._event.wait(timeout)


__all__ = ["CancellationToken"]
