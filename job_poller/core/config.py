"""Poller configuration loaded from environment variables.

All configuration values have defaults matching the built-in poll
behaviour (1 s interval, 90 tick budget, no wall-clock deadline).

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range, so a bad setting is caught when
    the command starts rather than mid-poll.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from job_poller.core.constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DURATION_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_RECEIPT_API_TIMEOUT_SECONDS,
    DEFAULT_RECEIPT_API_URL,
)
from job_poller.core.exceptions import ValidationError


class ConfigValidationError(ValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        reason: Description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")
        self.reason = message


@dataclass(frozen=True, slots=True)
class PollerConfig:
    """Immutable poller configuration.

    Attributes:
        poll_interval_seconds: Minimum spacing between tick starts.
        max_attempts: Tick budget (strict ``>`` comparison).
        max_duration_seconds: Wall-clock deadline; ``0`` disables it.
        receipt_api_url: GraphQL endpoint for receipt lookups.
        receipt_api_timeout_seconds: HTTP timeout per receipt request.
        receipt_api_token: Bearer token sent with receipt requests (empty
            when the caller's client already carries credentials).
    """

    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_duration_seconds: float = DEFAULT_MAX_DURATION_SECONDS
    receipt_api_url: str = DEFAULT_RECEIPT_API_URL
    receipt_api_timeout_seconds: float = DEFAULT_RECEIPT_API_TIMEOUT_SECONDS
    receipt_api_token: str = ""

    @property
    def max_duration(self) -> float | None:
        """Return the wall-clock deadline in seconds, or ``None`` if disabled."""
        return self.max_duration_seconds or None

    @classmethod
    def from_env(cls) -> PollerConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range
                or a required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``JOB_POLL_MAX_ATTEMPTS=abc``).
        """
        config = cls(
            poll_interval_seconds=float(
                os.getenv("JOB_POLL_INTERVAL_SECONDS", str(DEFAULT_POLL_INTERVAL_SECONDS))
            ),
            max_attempts=int(os.getenv("JOB_POLL_MAX_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS))),
            max_duration_seconds=float(
                os.getenv("JOB_POLL_MAX_DURATION_SECONDS", str(DEFAULT_MAX_DURATION_SECONDS))
            ),
            receipt_api_url=os.getenv("RECEIPT_API_URL", DEFAULT_RECEIPT_API_URL),
            receipt_api_timeout_seconds=float(
                os.getenv(
                    "RECEIPT_API_TIMEOUT_SECONDS", str(DEFAULT_RECEIPT_API_TIMEOUT_SECONDS)
                )
            ),
            receipt_api_token=os.getenv("RECEIPT_API_TOKEN", ""),
        )
        _validate(config)
        return config


def _validate(config: PollerConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.poll_interval_seconds < 0:
        raise ConfigValidationError(
            "JOB_POLL_INTERVAL_SECONDS",
            config.poll_interval_seconds,
            "must be >= 0 (seconds)",
        )

    if config.max_attempts < 0:
        raise ConfigValidationError(
            "JOB_POLL_MAX_ATTEMPTS",
            config.max_attempts,
            "must be >= 0",
        )

    if config.max_duration_seconds < 0:
        raise ConfigValidationError(
            "JOB_POLL_MAX_DURATION_SECONDS",
            config.max_duration_seconds,
            "must be >= 0 (seconds, 0 disables the deadline)",
        )

    if not config.receipt_api_url:
        raise ConfigValidationError(
            "RECEIPT_API_URL",
            config.receipt_api_url,
            "must not be empty",
        )

    if config.receipt_api_timeout_seconds <= 0:
        raise ConfigValidationError(
            "RECEIPT_API_TIMEOUT_SECONDS",
            config.receipt_api_timeout_seconds,
            "must be > 0 (seconds)",
        )
