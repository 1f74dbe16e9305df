"""Pydantic wire model for the ``BackgroundJobReceiptData`` GraphQL fragment.

The server speaks camelCase; the domain model is snake_case.  Field
aliases keep the mapping in one place, and ``to_receipt()`` produces
the frozen ``JobReceipt`` the poller classifies.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from job_poller.models.receipt import (
    BackgroundJobResultType,
    BackgroundJobState,
    JobReceipt,
)

#: Field selection sent with every receipt query.
RECEIPT_FRAGMENT = """
fragment BackgroundJobReceiptData on BackgroundJobReceipt {
  id
  state
  tries
  willRetry
  resultId
  resultType
  resultData
  errorCode
  errorMessage
  createdAt
  updatedAt
}
"""


class ReceiptPayload(BaseModel):
    """One receipt exactly as returned by the GraphQL API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    state: BackgroundJobState
    tries: int = 0
    will_retry: bool = Field(default=False, alias="willRetry")
    result_id: str | None = Field(default=None, alias="resultId")
    result_type: str | None = Field(default=None, alias="resultType")
    result_data: dict[str, Any] | None = Field(default=None, alias="resultData")
    error_code: str | None = Field(default=None, alias="errorCode")
    error_message: str | None = Field(default=None, alias="errorMessage")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    def to_receipt(self) -> JobReceipt:
        """Convert to the domain model.  Unknown result types map to ``None``."""
        try:
            result_type = BackgroundJobResultType(self.result_type) if self.result_type else None
        except ValueError:
            result_type = None

        return JobReceipt(
            id=self.id,
            state=self.state,
            tries=self.tries,
            will_retry=self.will_retry,
            result_type=result_type,
            result_id=self.result_id,
            result_data=self.result_data,
            error_code=self.error_code,
            error_message=self.error_message,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
