"""Poll failure taxonomy.

One exception class, discriminated by ``PollErrorType``.

- ``NULL_RECEIPT``             - no receipt to poll and no escape hook applied.
- ``JOB_FAILED_NO_WILL_RETRY`` - final server-side failure; message is for humans.
- ``TIMEOUT``                  - tick budget exhausted.
- ``DEADLINE_EXCEEDED``        - wall-clock deadline exhausted.
"""

from __future__ import annotations

import enum

from job_poller.core.exceptions import PermanentError

GENERIC_USER_MESSAGE = "Could not confirm that the background job completed."


class PollErrorType(enum.Enum):
    NULL_RECEIPT = "null_receipt"
    JOB_FAILED_NO_WILL_RETRY = "job_failed_no_will_retry"
    TIMEOUT = "timeout"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class BackgroundJobPollError(PermanentError):
    """Terminal poll failure.

    Attributes:
        error_type: Which terminal failure was reached.
        receipt_id: The receipt being polled.
        receipt_error_message: Server-provided failure text
            (``JOB_FAILED_NO_WILL_RETRY`` only).
        max_duration: The deadline that was exceeded
            (``DEADLINE_EXCEEDED`` only).
    """

    default_stage = "poll"

    def __init__(
        self,
        error_type: PollErrorType,
        *,
        receipt_id: str = "",
        receipt_error_message: str | None = None,
        max_duration: float | None = None,
    ) -> None:
        self.error_type = error_type
        self.receipt_id = receipt_id
        self.receipt_error_message = receipt_error_message
        self.max_duration = max_duration
        super().__init__(
            self._format_message(),
            code=f"BACKGROUND_JOB_{error_type.name}",
            correlation_id=receipt_id,
        )

    def _format_message(self) -> str:
        if self.error_type is PollErrorType.JOB_FAILED_NO_WILL_RETRY:
            return f"Background job failed with error: {self.receipt_error_message}"
        if self.error_type is PollErrorType.TIMEOUT:
            return "Background job timed out."
        if self.error_type is PollErrorType.DEADLINE_EXCEEDED:
            return f"Background job did not complete within {self.max_duration or 0:g}s."
        return "Background job receipt was null."

    @property
    def user_message(self) -> str:
        """Text suitable for direct display to an end user.

        Server failures are shown verbatim; poller and infrastructure
        failures collapse to a generic message.
        """
        if self.error_type is PollErrorType.JOB_FAILED_NO_WILL_RETRY and self.receipt_error_message:
            return self.receipt_error_message
        return GENERIC_USER_MESSAGE

    def to_error_dict(self) -> dict[str, object]:
        payload = super().to_error_dict()
        payload["error_type"] = self.error_type.value
        payload["receipt_id"] = self.receipt_id
        payload["receipt_error_message"] = self.receipt_error_message
        return payload
