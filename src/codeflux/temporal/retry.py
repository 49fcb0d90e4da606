"""Bounded retry with exponential backoff for repository calls.

The client never retries on its own; callers decide by running a call
through :func:`call_with_retry` with a :class:`RetryPolicy`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import TransientRepositoryError
from ..logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How often, and how patiently, to retry a transient failure.

    The backoff after failed attempt ``n`` is
    ``min(max_delay, base_delay * 2 ** (n - 1))``.
    """

    max_attempts: int = 3
    base_delay: float = 0.5
    max_delay: float = 8.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must be non-negative")

    def wait(self) -> wait_exponential:
        return wait_exponential(multiplier=self.base_delay, max=self.max_delay)


NO_RETRY = RetryPolicy(max_attempts=1, base_delay=0.0, max_delay=0.0)


def is_transient(exc: BaseException) -> bool:
    """Return True if ``exc`` is worth retrying.

    Only timeouts and spawn-time resource exhaustion qualify. A git command
    that ran and exited non-zero is permanent.
    """
    return isinstance(exc, TransientRepositoryError)


def call_with_retry(
    policy: RetryPolicy,
    func: Callable[..., T],
    *args,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs,
) -> T:
    """Call ``func`` and retry transient failures according to ``policy``.

    Permanent failures, and the last transient failure once attempts are
    exhausted, propagate unchanged.
    """

    def log_retry(state: RetryCallState) -> None:
        logger.warning(
            "Attempt %d/%d failed, retrying in %.2fs: %s",
            state.attempt_number,
            policy.max_attempts,
            state.next_action.sleep if state.next_action else 0.0,
            state.outcome.exception() if state.outcome else None,
        )

    retrying = Retrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=policy.wait(),
        retry=retry_if_exception(is_transient),
        reraise=True,
        sleep=sleep,
        before_sleep=log_retry,
    )
    return retrying(func, *args, **kwargs)
