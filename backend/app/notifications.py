from __future__ import annotations

import time
from collections.abc import Callable
from typing import Optional

from fastapi import Request


class Notifier:
    """Holds one transient message.

    Showing a new message replaces the current one and restarts its expiry
    instead of stacking.
    """

    def __init__(
        self, ttl_seconds: float = 2.0, clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._message: Optional[str] = None
        self._expires_at = 0.0

    def show(self, message: str) -> None:
        self._message = message
        self._expires_at = self.clock() + self.ttl_seconds

    def current(self) -> Optional[str]:
        if self._message is not None and self.clock() >= self._expires_at:
            self._message = None
        return self._message

    def clear(self) -> None:
        self._message = None


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
