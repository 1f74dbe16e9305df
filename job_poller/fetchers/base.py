"""ReceiptFetcher abstract base class.

Defines the contract every receipt source must implement.  The poller
interacts exclusively with this interface; it never knows which
transport is behind it.

Contract:
    ``fetch(receipt_id)`` returns the current ``JobReceipt`` (or ``None``
    when the server has no receipt) and raises ``TransportError`` for any
    network, HTTP or GraphQL failure.  It must be read-only and
    idempotent: the poller may call it an unbounded number of times and
    share one fetcher across concurrent poll invocations.

Any exception other than ``TransportError`` is treated as a programming
error and propagates through the poller untouched.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from job_poller.core.exceptions import TransientError

if TYPE_CHECKING:
    from job_poller.models.receipt import JobReceipt


class ReceiptFetcher(abc.ABC):
    """Abstract base class for receipt sources.

    Example usage::

        fetcher = GraphQLReceiptFetcher(client, endpoint)
        receipt = await fetcher.fetch("receipt-123")
    """

    @abc.abstractmethod
    async def fetch(self, receipt_id: str) -> JobReceipt | None:
        """Return the current receipt for *receipt_id*.

        Args:
            receipt_id: Opaque receipt identifier.

        Returns:
            The latest ``JobReceipt``, or ``None`` if the server returned
            no receipt.

        Raises:
            TransportError: On network, HTTP or GraphQL errors.
        """


# ---------------------------------------------------------------------------
# Transport exceptions
# ---------------------------------------------------------------------------


class TransportError(TransientError):
    """Combined network / HTTP / GraphQL error from a receipt fetch.

    Attributes:
        status_code: HTTP status, when the server answered.
        graphql_errors: Raw ``errors`` entries from a GraphQL response.
    """

    default_stage = "fetch_receipt"
    default_code = "RECEIPT_TRANSPORT_FAILED"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        graphql_errors: tuple[dict[str, Any], ...] = (),
        correlation_id: str = "",
    ) -> None:
        self.status_code = status_code
        self.graphql_errors = graphql_errors
        super().__init__(message, correlation_id=correlation_id)

    @property
    def error_codes(self) -> tuple[str, ...]:
        """Machine-readable codes from ``extensions.errorCode`` / ``extensions.code``."""
        codes: list[str] = []
        for entry in self.graphql_errors:
            extensions = entry.get("extensions") or {}
            code = extensions.get("errorCode") or extensions.get("code")
            if code:
                codes.append(str(code))
        return tuple(codes)

    @property
    def is_not_found(self) -> bool:
        """Whether the server reported that the entity does not exist."""
        if self.status_code == 404:
            return True
        return any("NOT_FOUND" in code.upper() for code in self.error_codes)

    def to_error_dict(self) -> dict[str, object]:
        payload = super().to_error_dict()
        payload["status_code"] = self.status_code
        payload["error_codes"] = list(self.error_codes)
        return payload
