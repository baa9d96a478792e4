"""
Retry Utilities for the ATTPs SDK.

Provides bounded exponential backoff for idempotent, read-only remote
calls. Write transactions never go through here: they are submitted at
most once by the submission pipeline.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass, field
from functools import wraps
from typing import (
    Awaitable,
    Callable,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from attps.constants import (
    DEFAULT_BACKOFF_MULTIPLIER,
    DEFAULT_BASE_DELAY_MS,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY_MS,
)
from attps.errors import DeadlineExceededError
from attps.utils.logging import get_logger

T = TypeVar("T")

_logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry behavior.

    The defaults give at most 3 attempts with pauses of 100ms and 200ms
    in between, no jitter, and every error treated as retryable except a
    deadline expiry.

    Example:
        ```python
        config = RetryConfig(
            max_attempts=5,
            base_delay_ms=250,
            retryable_errors=(RemoteReadError,),
        )
        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    """Maximum number of attempts, including the first one."""

    base_delay_ms: int = DEFAULT_BASE_DELAY_MS
    """Pause before the first retry, in milliseconds."""

    max_delay_ms: int = DEFAULT_MAX_DELAY_MS
    """Maximum delay in milliseconds (cap for exponential growth)."""

    jitter: bool = False
    """Whether to add random jitter to delays."""

    exponential_base: float = DEFAULT_BACKOFF_MULTIPLIER
    """Multiplier applied to the delay after each failed attempt."""

    retryable_errors: Tuple[Type[BaseException], ...] = field(
        default_factory=lambda: (Exception,)
    )
    """Tuple of exception types that should trigger a retry."""

    non_retryable_errors: Tuple[Type[BaseException], ...] = field(
        default_factory=lambda: (DeadlineExceededError,)
    )
    """Exception types raised immediately even if they match retryable_errors."""

    attempt_timeout: Optional[float] = None
    """Deadline in seconds for a single attempt (None = wait indefinitely)."""

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("delays must be non-negative")
        if self.attempt_timeout is not None and self.attempt_timeout <= 0:
            raise ValueError("attempt_timeout must be positive")

    @classmethod
    def disabled(cls, attempt_timeout: Optional[float] = None) -> "RetryConfig":
        """Single-attempt policy (no retries, no pauses)."""
        return cls(max_attempts=1, base_delay_ms=0, attempt_timeout=attempt_timeout)


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay with exponential backoff and optional jitter.

    Args:
        attempt: Zero-based retry number (0 = pause before the first retry)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay_ms = config.base_delay_ms * (config.exponential_base ** attempt)
    delay_ms = min(delay_ms, config.max_delay_ms)

    if config.jitter:
        # Full jitter: random value between 0 and calculated delay
        delay_ms = random.uniform(0, delay_ms)

    return delay_ms / 1000


async def _run_attempt(
    fn: Callable[[], Awaitable[T]],
    config: RetryConfig,
    description: Optional[str],
) -> T:
    if config.attempt_timeout is None:
        return await fn()
    try:
        return await asyncio.wait_for(fn(), timeout=config.attempt_timeout)
    except asyncio.TimeoutError:
        raise DeadlineExceededError(
            "call", config.attempt_timeout, method=description
        ) from None


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    description: Optional[str] = None,
) -> T:
    """
    Execute async function with retry logic.

    Args:
        fn: Async function to execute (no arguments); called once per attempt
        config: Retry configuration (uses defaults if None)
        description: Name used in log records and deadline errors

    Returns:
        Result of the function

    Raises:
        The error of the final attempt, unchanged. Non-retryable errors
        are raised on the attempt that produced them.
    """
    config = config or RetryConfig()
    last_error: Optional[BaseException] = None

    for attempt in range(config.max_attempts):
        try:
            return await _run_attempt(fn, config, description)
        except config.non_retryable_errors:
            raise
        except config.retryable_errors as e:
            last_error = e

            # Don't delay after last attempt
            if attempt < config.max_attempts - 1:
                delay = calculate_delay(attempt, config)
                _logger.warning(
                    "Remote call failed, retrying",
                    extra={
                        "call": description,
                        "attempt": attempt + 1,
                        "max_attempts": config.max_attempts,
                        "delay_s": delay,
                        "error": str(e),
                    },
                )
                await asyncio.sleep(delay)

    _logger.error(
        "Remote call failed after all attempts",
        extra={"call": description, "attempts": config.max_attempts, "error": str(last_error)},
    )
    if last_error is not None:
        raise last_error

    # This should never happen, but just in case
    raise RuntimeError("Retry exhausted without error")


def with_retry(
    config: Optional[RetryConfig] = None,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator for adding retry logic to async functions.

    Example:
        ```python
        @with_retry(RetryConfig(max_attempts=5))
        async def fetch_owner(contract) -> str:
            return await contract.functions.owner().call()
        ```
    """
    def decorator(
        fn: Callable[..., Awaitable[T]],
    ) -> Callable[..., Awaitable[T]]:
        @wraps(fn)
        async def wrapper(*args: object, **kwargs: object) -> T:
            return await retry_async(
                lambda: fn(*args, **kwargs),
                config,
                fn.__name__,
            )
        return wrapper
    return decorator


class RetryingReadExecutor:
    """
    Runs read-only remote queries under a RetryConfig.

    The policy is injected so tests (or callers) can swap it, e.g. with
    ``RetryConfig.disabled()``, without touching call sites.
    """

    def __init__(self, config: Optional[RetryConfig] = None) -> None:
        self._config = config or RetryConfig()

    @property
    def config(self) -> RetryConfig:
        return self._config

    async def execute(
        self,
        op: Callable[[], Awaitable[T]],
        description: Optional[str] = None,
    ) -> T:
        """Run ``op`` until it succeeds or the attempt budget is spent."""
        return await retry_async(op, self._config, description)
