# File: /gridbase/client/debounce.py | Version: 1.0 | Title: Trailing-edge debouncer (poll-driven, injectable clock)
from __future__ import annotations

import time
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class Debouncer(Generic[T]):
    """
    Holds the last settled value. ``push`` restarts the delay; the pushed
    value settles once ``delay_ms`` has passed without another push and the
    caller polls.
    """

    def __init__(
        self,
        initial: T,
        delay_ms: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.value: T = initial
        self.delay = delay_ms / 1000.0
        self.clock = clock
        self._pending: Optional[T] = None
        self._due: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._due is not None

    def push(self, value: T) -> None:
        self._pending = value
        self._due = self.clock() + self.delay

    def reset(self, value: T) -> None:
        """Settle immediately (e.g. when a saved view is loaded)."""
        self.value = value
        self._pending = None
        self._due = None

    def poll(self) -> T:
        if self._due is not None and self.clock() >= self._due:
            self.reset(self._pending)  # type: ignore[arg-type]
        return self.value
