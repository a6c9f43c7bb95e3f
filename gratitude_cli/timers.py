"""Fire-once, cancelable timers for inactivity and auto-dismiss delays."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CancelableTimer:
    """A single delayed callback that can be cancelled before it fires."""

    def __init__(self, delay_seconds: float, callback: Callable[[], None]) -> None:
        self.delay_seconds = delay_seconds
        self.callback = callback
        self._timer: Optional[threading.Timer] = None
        self._fired = False

    def start(self) -> None:
        if self._timer is not None:
            return
        self._timer = threading.Timer(self.delay_seconds, self._run)
        self._timer.daemon = True
        self._timer.start()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def pending(self) -> bool:
        return self._timer is not None and self._timer.is_alive() and not self._fired

    def _run(self) -> None:
        self._fired = True
        try:
            self.callback()
        except Exception as exc:
            logger.warning("Timer callback failed: %s", exc)


class TimerSlot:
    """Holds at most one pending timer for a single purpose.

    Scheduling always cancels whatever the slot held before, so a stale
    callback can never fire after it has been superseded.
    """

    def __init__(
        self,
        delay_seconds: float,
        callback: Callable[[], None],
        timer_factory: Callable[[float, Callable[[], None]], CancelableTimer] = CancelableTimer,
    ) -> None:
        self.delay_seconds = delay_seconds
        self.callback = callback
        self._factory = timer_factory
        self.current: Optional[CancelableTimer] = None

    def schedule(self) -> CancelableTimer:
        self.stop()
        self.current = self._factory(self.delay_seconds, self.callback)
        self.current.start()
        return self.current

    def stop(self) -> None:
        if self.current is not None:
            self.current.cancel()
            self.current = None

    @property
    def active(self) -> bool:
        return self.current is not None
