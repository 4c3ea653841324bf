from dataclasses import dataclass
from typing import Callable, Optional
import time

from aggregation.core.exceptions import CircuitOpenError


@dataclass(frozen=True)
class CircuitBreakerSnapshot:
    state: str
    consecutive_failures: int
    open_until: Optional[float]


class CircuitBreaker:
    """Consecutive-failure breaker guarding one provider."""

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        reset_timeout: float = 30.0,
        time_fn: Callable[[], float] = time.monotonic
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._time = time_fn
        self._state = "closed"
        self._consecutive_failures = 0
        self._open_until: Optional[float] = None
        self._half_open_probe_in_flight = False

    def snapshot(self) -> CircuitBreakerSnapshot:
        return CircuitBreakerSnapshot(
            state=self.state(),
            consecutive_failures=self._consecutive_failures,
            open_until=self._open_until,
        )

    def state(self) -> str:
        if self._state == "open" and self._open_until is not None and self._time() >= self._open_until:
            self._state = "half_open"
            self._half_open_probe_in_flight = False
        return self._state

    def before_call(self) -> None:
        state = self.state()
        if state == "open":
            raise CircuitOpenError(self.name, self._open_until - self._time())
        if state == "half_open":
            if self._half_open_probe_in_flight:
                raise CircuitOpenError(self.name, 0.0)
            self._half_open_probe_in_flight = True

    def record_success(self) -> None:
        self._state = "closed"
        self._consecutive_failures = 0
        self._open_until = None
        self._half_open_probe_in_flight = False

    def release_probe(self) -> None:
        """Let another half-open probe through after one ended unrecorded."""
        self._half_open_probe_in_flight = False

    def record_failure(self) -> None:
        now = self._time()
        if self.state() == "half_open":
            self._open(now)
            return

        self._consecutive_failures += 1
        if self._consecutive_failures >= self.failure_threshold:
            self._open(now)

    def _open(self, now: float) -> None:
        self._state = "open"
        self._open_until = now + self.reset_timeout
        self._half_open_probe_in_flight = False
