"""Cooperative cancellation for long-running decodes."""

from __future__ import annotations

import threading

from pcm_extract.errors import DecodeCancelledError


class CancellationToken:
    """Thread-safe flag checked by the frame decoder on every loop iteration."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise DecodeCancelledError(self.reason or "Decode was cancelled.")
