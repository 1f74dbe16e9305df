"""Typed model for background-job receipts.

A receipt is the server's immutable snapshot of an asynchronous job
(scheduled deletion, export, background mutation).  Each poll tick
fetches a fresh receipt; the client never mutates one.

- ``BackgroundJobState``: lifecycle state reported by the server
- ``BackgroundJobResultType``: tag describing the success payload
- ``JobReceipt``: one snapshot, with terminal-state classification

Design notes:
- Frozen dataclass, validated in ``__post_init__``.
- ``will_retry`` is only meaningful when ``state == FAILURE``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from job_poller.core.exceptions import ValidationError

if TYPE_CHECKING:
    from datetime import datetime


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ModelValidationError(ValueError, ValidationError):
    """Raised when a domain model is constructed with invalid field values.

    Attributes:
        model: Name of the model class that failed validation.
        field_name: The field that violated the invariant.
        value: The invalid value.
    """

    default_stage = "model_validation"
    default_code = "MODEL_VALIDATION_FAILED"

    def __init__(self, model: str, field_name: str, value: object, message: str) -> None:
        self.model = model
        self.field_name = field_name
        self.value = value
        formatted = f"{model}.{field_name}={value!r}: {message}"
        ValidationError.__init__(self, formatted)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class BackgroundJobState(enum.Enum):
    """Lifecycle state of a background job.

    Values:
        QUEUED:      Scheduled, not yet picked up by a worker.
        IN_PROGRESS: A worker is executing the job.
        SUCCESS:     Job finished; result fields are populated.
        FAILURE:     The last attempt failed; see ``will_retry``.
    """

    QUEUED = "QUEUED"
    IN_PROGRESS = "IN_PROGRESS"
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


class BackgroundJobResultType(enum.Enum):
    """Shape of ``result_id`` / ``result_data`` on a successful receipt."""

    VOID = "VOID"
    APP = "APP"
    CHANNEL = "CHANNEL"
    UPDATE = "UPDATE"
    UPDATE_GROUP = "UPDATE_GROUP"
    ENVIRONMENT_VARIABLE = "ENVIRONMENT_VARIABLE"


# ---------------------------------------------------------------------------
# Receipt
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class JobReceipt:
    """Server-side status snapshot of one background job.

    Attributes:
        id: Opaque receipt identifier, stable for the job lifetime.
        state: Current lifecycle state.
        tries: Number of execution attempts the server has made.
        will_retry: On ``FAILURE``, whether the server will try again.
        result_type: Tag describing the success payload, if known.
        result_id: Identifier of the produced entity (``SUCCESS`` only).
        result_data: Free-form success payload (``SUCCESS`` only).
        error_code: Machine-readable failure code (``FAILURE`` only).
        error_message: Human-readable failure text (``FAILURE`` only).
        created_at: When the job was scheduled.
        updated_at: When the receipt last changed.
    """

    id: str
    state: BackgroundJobState
    tries: int = 0
    will_retry: bool = False
    result_type: BackgroundJobResultType | None = None
    result_id: str | None = None
    result_data: dict[str, Any] | None = None
    error_code: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ModelValidationError("JobReceipt", "id", self.id, "must not be empty")
        if not isinstance(self.state, BackgroundJobState):
            raise ModelValidationError(
                "JobReceipt", "state", self.state, "must be a BackgroundJobState"
            )
        if self.tries < 0:
            raise ModelValidationError("JobReceipt", "tries", self.tries, "must be >= 0")

    @property
    def is_success(self) -> bool:
        return self.state is BackgroundJobState.SUCCESS

    @property
    def is_fatal_failure(self) -> bool:
        """A failure the server will not retry."""
        return self.state is BackgroundJobState.FAILURE and not self.will_retry

    @property
    def is_terminal(self) -> bool:
        """Whether polling can stop on this receipt.

        ``FAILURE`` with ``will_retry=True`` is transient, like ``QUEUED``
        and ``IN_PROGRESS``.
        """
        return self.is_success or self.is_fatal_failure
