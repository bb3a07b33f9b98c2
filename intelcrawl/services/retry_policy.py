import random
from dataclasses import dataclass
from typing import Callable, FrozenSet

from intelcrawl.domain.error_kind import ErrorKind


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry policy expressed as a lookup over `ErrorKind`.

    `max_retries` counts retries after the first attempt. The delay before
    retry `n` (1-based) is exponential backoff with up to 10% jitter, plus
    `extra_delay_seconds` for kinds in `extra_delay_kinds`.
    """

    max_retries: int
    retryable: FrozenSet[ErrorKind]
    extra_delay_kinds: FrozenSet[ErrorKind] = frozenset()
    extra_delay_seconds: float = 0.0
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0

    def is_retryable(self, kind: ErrorKind) -> bool:
        return kind in self.retryable

    @staticmethod
    def is_terminal(kind: ErrorKind) -> bool:
        return kind.is_terminal

    def should_retry(self, kind: ErrorKind, retries_done: int) -> bool:
        return retries_done < self.max_retries and self.is_retryable(kind)

    def backoff(self, retry_number: int, rand: Callable[[], float] = random.random) -> float:
        delay = min(self.base_delay_seconds * (2 ** retry_number), self.max_delay_seconds)
        return delay + delay * 0.1 * rand()

    def delay_before_retry(self, kind: ErrorKind, retry_number: int, rand: Callable[[], float] = random.random) -> float:
        delay = self.backoff(retry_number, rand)
        if kind in self.extra_delay_kinds:
            delay += self.extra_delay_seconds
        return delay


# DNS failures are retried by the static fetcher since they may be transient.
STATIC_RETRY_POLICY = RetryPolicy(
    max_retries=2,
    retryable=frozenset({ErrorKind.TIMEOUT, ErrorKind.RESET, ErrorKind.DNS, ErrorKind.HTTP_5XX}),
)

RENDERED_RETRY_POLICY = RetryPolicy(
    max_retries=3,
    retryable=frozenset({ErrorKind.TIMEOUT, ErrorKind.DETACHED, ErrorKind.PROTOCOL, ErrorKind.RESET}),
    extra_delay_kinds=frozenset({ErrorKind.TIMEOUT, ErrorKind.DETACHED}),
    extra_delay_seconds=5.0,
)

NO_RETRY_POLICY = RetryPolicy(max_retries=0, retryable=frozenset())
