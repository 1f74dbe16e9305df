"""Data models and schemas.

- JobReceipt: Server snapshot of a background job
- ReceiptPayload: GraphQL wire shape of a receipt
"""

from job_poller.models.receipt import (
    BackgroundJobResultType,
    BackgroundJobState,
    JobReceipt,
    ModelValidationError,
)

__all__ = [
    "BackgroundJobResultType",
    "BackgroundJobState",
    "JobReceipt",
    "ModelValidationError",
]
