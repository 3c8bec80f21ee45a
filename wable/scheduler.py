"""
Rate-aware request scheduling for the Workable API.

Every API call is funnelled through one RequestScheduler, which runs calls
one at a time in submission order and pauses when the quota window reported
by the server is used up.
"""

import threading
import time
from collections import deque
from concurrent.futures import Future
from dataclasses import dataclass, replace
from typing import Any, Callable, Deque, Mapping, Optional, Tuple

from .logger import get_logger

logger = get_logger()

DEFAULT_LIMIT = 10
MIN_INTERVAL = 0.1  # seconds between successive calls
RESET_MARGIN = 1.0  # seconds added to the server's reset time

LIMIT_HEADER = "x-rate-limit-limit"
REMAINING_HEADER = "x-rate-limit-remaining"
RESET_HEADER = "x-rate-limit-reset"


def _int_header(headers: Mapping[str, Any], name: str, default: int) -> int:
    try:
        return int(headers.get(name))
    except (TypeError, ValueError):
        return default


@dataclass
class RateLimitState:
    """Quota as last reported by the server. limit=None means not yet known."""

    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset: int = 0

    @property
    def known(self) -> bool:
        return self.limit is not None

    def exhausted(self) -> bool:
        return self.remaining is not None and self.remaining <= 1

    def update(self, headers: Mapping[str, Any]) -> None:
        self.limit = _int_header(headers, LIMIT_HEADER, DEFAULT_LIMIT)
        self.remaining = _int_header(headers, REMAINING_HEADER, self.limit)
        self.reset = _int_header(headers, RESET_HEADER, 0)


class RequestScheduler:
    """
    Single-consumer FIFO queue of outbound calls.

    A worker thread is started when the first call is queued and exits once the
    queue is empty; submissions made while it runs join the same drain, so at
    most one call is in flight at any time.

    Callables should return an object with a ``headers`` mapping (for example a
    ``requests.Response``); those headers feed the quota state. Exceptions are
    delivered to the caller that scheduled the failing call only.
    """

    def __init__(
        self,
        min_interval: float = MIN_INTERVAL,
        reset_margin: float = RESET_MARGIN,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._min_interval = min_interval
        self._reset_margin = reset_margin
        self._clock = clock
        self._sleep = sleep

        self._state = RateLimitState()
        self._queue: Deque[Tuple[Callable[[], Any], Future]] = deque()
        self._lock = threading.Lock()
        self._draining = False
        self._last_call_at: Optional[float] = None

    @property
    def rate_limit(self) -> RateLimitState:
        """Copy of the current quota state."""
        with self._lock:
            return replace(self._state)

    @property
    def idle(self) -> bool:
        with self._lock:
            return not self._draining and not self._queue

    def submit(self, call: Callable[[], Any]) -> Future:
        """Queue a call and return a Future for its result."""
        future: Future = Future()
        with self._lock:
            self._queue.append((call, future))
            if self._draining:
                return future
            self._draining = True

        worker = threading.Thread(target=self._drain, name="wable-scheduler", daemon=True)
        worker.start()
        return future

    def schedule(self, call: Callable[[], Any]) -> Any:
        """Queue a call and block until it has run; returns its result or raises its error."""
        return self.submit(call).result()

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._queue:
                    self._draining = False
                    return
                call, future = self._queue.popleft()

            if not future.set_running_or_notify_cancel():
                continue

            self._wait_for_turn()
            self._last_call_at = self._clock()
            logger.record_api_call()
            try:
                result = call()
            except Exception as exc:
                self._observe(getattr(getattr(exc, "response", None), "headers", None))
                future.set_exception(exc)
            else:
                self._observe(getattr(result, "headers", None))
                future.set_result(result)

    def _wait_for_turn(self) -> None:
        with self._lock:
            exhausted = self._state.exhausted()
            reset = self._state.reset

        if exhausted:
            delay = reset + self._reset_margin - self._clock()
            if delay > 0:
                logger.warning(
                    f"Rate limit reached, waiting {delay:.1f}s for quota reset",
                    reset=reset,
                )
                logger.record_rate_limit_wait()
                self._sleep(delay)

        if self._last_call_at is not None:
            gap = self._last_call_at + self._min_interval - self._clock()
            if gap > 0:
                self._sleep(gap)

    def _observe(self, headers: Optional[Mapping[str, Any]]) -> None:
        if headers is None:
            return
        with self._lock:
            self._state.update(headers)
        logger.debug(
            "Rate limit state updated",
            limit=self._state.limit,
            remaining=self._state.remaining,
            reset=self._state.reset,
        )
