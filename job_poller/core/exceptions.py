"""Exception hierarchy for the job poller.

Every domain exception raised by the package inherits from
``PollerError``.  The concrete category class decides both the
``category`` label and whether a retry could help; callers never pass
those in.

Categories
----------
- ``ValidationError``   - bad arguments, config or receipt values.
- ``TransientError``    - transport failures (network, HTTP, GraphQL).
- ``PermanentError``    - the job reached a terminal failure.
- ``ContractError``     - a receipt payload drifted from the server schema.

``to_error_dict()`` returns a flat payload with stable keys for logging.
"""

from __future__ import annotations


class PollerError(Exception):
    """Base exception for all job-poller errors.

    Attributes:
        message: Human-readable error description.
        stage: Component where the error occurred
            (e.g. ``"fetch_receipt"``, ``"poll"``).
        code: Machine-readable error code (e.g. ``"RECEIPT_TRANSPORT_FAILED"``).
        correlation_id: Receipt identifier for diagnostics.
    """

    category: str = "permanent"
    retryable: bool = False
    default_stage: str = ""
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.correlation_id = correlation_id
        super().__init__(message)

    def to_error_dict(self) -> dict[str, object]:
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


class ValidationError(PollerError):
    category = "validation"


class TransientError(PollerError):
    """A fetch that failed for reasons outside the job; the next tick may succeed."""

    category = "transient"
    retryable = True


class PermanentError(PollerError):
    category = "permanent"


class ContractError(PollerError):
    """Receipt payload does not match the expected schema."""

    category = "contract"
