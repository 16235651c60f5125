# Bounded retry with linear backoff and a per-attempt cancel token.

import logging
import time
from typing import Callable, List, Optional, Tuple, Type, TypeVar

import constants

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancelToken:
    """Deadline for one attempt. A fresh token is armed for every retry."""

    def __init__(self, timeout: float, clock: Callable[[], float] = time.monotonic):
        self.timeout = timeout
        self._clock = clock
        self._deadline = clock() + timeout
        self._cancelled = False

    def remaining(self) -> float:
        if self._cancelled:
            return 0.0
        return max(0.0, self._deadline - self._clock())

    @property
    def expired(self) -> bool:
        return self._clock() >= self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled or self.expired

    def cancel(self) -> None:
        self._cancelled = True


class RetryPolicy:
    """Retry limits: ``max_retries`` extra attempts, the n-th waiting ``backoff_base * n``."""

    def __init__(
        self,
        max_retries: int = constants.MAX_RETRIES,
        backoff_base: float = constants.RETRY_BACKOFF_SECONDS,
        timeout: float = constants.REQUEST_TIMEOUT_SECONDS,
    ):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.timeout = timeout

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delays(self) -> List[float]:
        return [self.backoff_base * n for n in range(1, self.max_retries + 1)]

    def __repr__(self) -> str:
        return (f"RetryPolicy(max_retries={self.max_retries}, "
                f"backoff_base={self.backoff_base}, timeout={self.timeout})")


def call_with_retry(
    func: Callable[[CancelToken], T],
    policy: Optional[RetryPolicy] = None,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
    on_retry: Optional[Callable[[int, BaseException], None]] = None,
) -> T:
    """Call ``func(token)`` until it succeeds or the policy is exhausted.

    Exceptions not listed in ``retry_on`` propagate immediately. Once all
    attempts have failed the last token is cancelled and the last exception
    is re-raised.
    """
    policy = policy or RetryPolicy()
    delays = policy.delays()

    for attempt in range(1, policy.max_attempts + 1):
        token = CancelToken(policy.timeout)
        try:
            return func(token)
        except retry_on as e:
            if attempt >= policy.max_attempts:
                token.cancel()
                logger.error("Giving up after %d attempts: %s", attempt, e)
                raise
            delay = delays[attempt - 1]
            logger.warning("Attempt %d/%d failed (%s), retrying in %.1fs",
                           attempt, policy.max_attempts, e, delay)
            if on_retry:
                on_retry(attempt, e)
            sleep(delay)

    raise AssertionError("unreachable")
