"""Poll options and the transport-error escape hook.

``PollOptions`` separates the two limits a poll invocation honours:

- ``max_attempts`` - the tick budget, compared with ``>`` against the
  count of non-terminal receipts (so ``max_attempts + 1`` are allowed).
- ``max_duration`` - an optional wall-clock deadline, independent of
  how slow the fetcher is.

``on_poll_error`` lets the caller declare that a given ``TransportError``
means the job already had its effect (for example, the deleted entity is
"not found"), which ends the poll as an assumed success.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from job_poller.core.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_POLL_INTERVAL_SECONDS
from job_poller.fetchers.base import TransportError
from job_poller.models.receipt import ModelValidationError

if TYPE_CHECKING:
    from job_poller.core.config import PollerConfig


@dataclass(frozen=True, slots=True)
class PollErrorDecision:
    """Escape-hook verdict for one transport error.

    Attributes:
        error_indicates_success: Treat the error as a non-failing terminal
            outcome and stop polling.
    """

    error_indicates_success: bool = False


# A hook returning ``None`` declines, same as ``PollErrorDecision()``.
PollErrorHook = Callable[
    [TransportError], PollErrorDecision | Awaitable[PollErrorDecision | None] | None
]


def not_found_indicates_success(error: TransportError) -> PollErrorDecision:
    """Escape hook for deletions: a missing entity means the job finished."""
    return PollErrorDecision(error_indicates_success=error.is_not_found)


@dataclass(frozen=True, slots=True)
class PollOptions:
    """Configuration for one poll invocation.

    Attributes:
        poll_interval: Minimum spacing in seconds between tick starts.
        on_poll_error: Optional escape hook for transport errors.
        max_attempts: Tick budget (strict ``>`` comparison).
        max_duration: Wall-clock deadline in seconds; ``None`` disables it.
    """

    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    on_poll_error: PollErrorHook | None = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_duration: float | None = None

    def __post_init__(self) -> None:
        if self.poll_interval < 0:
            raise ModelValidationError(
                "PollOptions", "poll_interval", self.poll_interval, "must be >= 0"
            )
        if self.max_attempts < 0:
            raise ModelValidationError(
                "PollOptions", "max_attempts", self.max_attempts, "must be >= 0"
            )
        if self.max_duration is not None and self.max_duration <= 0:
            raise ModelValidationError(
                "PollOptions", "max_duration", self.max_duration, "must be > 0 or None"
            )

    @classmethod
    def from_config(
        cls,
        config: PollerConfig,
        *,
        on_poll_error: PollErrorHook | None = None,
    ) -> PollOptions:
        """Build options from environment-derived configuration."""
        return cls(
            poll_interval=config.poll_interval_seconds,
            on_poll_error=on_poll_error,
            max_attempts=config.max_attempts,
            max_duration=config.max_duration,
        )
