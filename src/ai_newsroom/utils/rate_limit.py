"""Rate limiting between calls to external APIs.

The newsroom processes angles one at a time and pauses between them to stay
under the model and search providers' rate limits. The policy is a small
object so it can be swapped, and both the clock and the sleep are injectable
so tests never wait on the wall clock.

Usage:
    limiter = FixedDelay(2.0)
    for i, item in enumerate(items):
        if i > 0 and not limiter.wait(cancel_event):
            break  # cancelled while waiting
        process(item)
"""

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """Base class: ``wait()`` blocks until the next call is allowed."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self._clock = clock
        self._sleep_fn = sleep

    def wait(self, cancel_event: Optional[threading.Event] = None) -> bool:
        """Block until allowed.

        Returns:
            False if ``cancel_event`` was set before or during the wait, True otherwise.
        """
        raise NotImplementedError

    def _sleep(self, seconds: float, cancel_event: Optional[threading.Event]) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return False
        if seconds <= 0:
            return True
        if self._sleep_fn is not None:
            self._sleep_fn(seconds)
            return not (cancel_event is not None and cancel_event.is_set())
        if cancel_event is not None:
            # Event.wait returns True when the event fires, i.e. we were cancelled
            return not cancel_event.wait(seconds)
        time.sleep(seconds)
        return True


class FixedDelay(RateLimiter):
    """Sleep the same fixed delay on every call."""

    def __init__(self, seconds: float, **kwargs):
        super().__init__(**kwargs)
        if seconds < 0:
            raise ValueError("seconds must not be negative")
        self.seconds = seconds

    def wait(self, cancel_event: Optional[threading.Event] = None) -> bool:
        if self.seconds > 0:
            logger.info(f"  Waiting {self.seconds:g}s to avoid rate limits...")
        return self._sleep(self.seconds, cancel_event)


class FixedIntervalGate(RateLimiter):
    """Let at most one call through per ``seconds``; the first call is free.

    Unlike ``FixedDelay``, time already spent since the previous pass counts
    toward the interval.
    """

    def __init__(self, seconds: float, **kwargs):
        super().__init__(**kwargs)
        if seconds < 0:
            raise ValueError("seconds must not be negative")
        self.seconds = seconds
        self._last_pass: Optional[float] = None
        self._lock = threading.Lock()

    def wait(self, cancel_event: Optional[threading.Event] = None) -> bool:
        with self._lock:
            if self._last_pass is not None:
                remaining = self._last_pass + self.seconds - self._clock()
                if remaining > 0:
                    logger.info(f"  Waiting {remaining:.1f}s to avoid rate limits...")
                    if not self._sleep(remaining, cancel_event):
                        return False
            elif cancel_event is not None and cancel_event.is_set():
                return False
            self._last_pass = self._clock()
            return True
