"""GraphQL receipt fetcher.

Looks receipts up with the ``backgroundJobReceipt.byId`` query over an
``httpx.AsyncClient``.  Every transport-level failure is folded into a
single ``TransportError`` so the poller can classify it; a well-formed
GraphQL body whose receipt does not match the fragment raises
``ContractError``.

Error mapping:
    - connect / read / timeout errors  -> ``TransportError``
    - HTTP 4xx / 5xx                   -> ``TransportError(status_code=...)``
    - body is not a JSON object        -> ``TransportError(status_code=...)``
    - non-empty GraphQL ``errors``     -> ``TransportError(graphql_errors=...)``
    - ``byId`` is ``null``             -> ``None``
    - receipt fails the fragment       -> ``ContractError``
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
import pydantic

from job_poller.core.exceptions import ContractError
from job_poller.fetchers.base import ReceiptFetcher, TransportError
from job_poller.models.payloads import RECEIPT_FRAGMENT, ReceiptPayload
from job_poller.models.receipt import ModelValidationError

if TYPE_CHECKING:
    from types import TracebackType

    from job_poller.core.config import PollerConfig
    from job_poller.models.receipt import JobReceipt

logger = logging.getLogger(__name__)

RECEIPT_BY_ID_QUERY = (
    """
query BackgroundJobReceiptById($id: ID!) {
  backgroundJobReceipt {
    byId(id: $id) {
      id
      ...BackgroundJobReceiptData
    }
  }
}
"""
    + RECEIPT_FRAGMENT
)


class GraphQLReceiptFetcher(ReceiptFetcher):
    """Fetch receipts from a GraphQL endpoint.

    The client is borrowed unless the fetcher was built with
    ``from_config``, in which case ``aclose()`` (or ``async with``)
    closes it.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        endpoint: str,
        *,
        owns_client: bool = False,
    ) -> None:
        self._client = client
        self._endpoint = endpoint
        self._owns_client = owns_client

    @classmethod
    def from_config(cls, config: PollerConfig) -> GraphQLReceiptFetcher:
        """Build a fetcher with its own ``httpx.AsyncClient``."""
        headers: dict[str, str] = {}
        if config.receipt_api_token:
            headers["Authorization"] = f"Bearer {config.receipt_api_token}"
        client = httpx.AsyncClient(
            timeout=config.receipt_api_timeout_seconds,
            headers=headers,
        )
        return cls(client, config.receipt_api_url, owns_client=True)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def fetch(self, receipt_id: str) -> JobReceipt | None:
        """Run ``backgroundJobReceipt.byId`` for *receipt_id*."""
        try:
            response = await self._client.post(
                self._endpoint,
                json={
                    "query": RECEIPT_BY_ID_QUERY,
                    "variables": {"id": receipt_id},
                    "operationName": "BackgroundJobReceiptById",
                },
            )
        except httpx.HTTPError as exc:
            msg = f"Receipt request failed for {receipt_id!r}: {exc}"
            raise TransportError(msg, correlation_id=receipt_id) from exc

        if response.is_error:
            msg = f"Receipt request for {receipt_id!r} returned HTTP {response.status_code}"
            raise TransportError(
                msg,
                status_code=response.status_code,
                graphql_errors=_graphql_errors(response),
                correlation_id=receipt_id,
            )

        try:
            body = response.json()
        except ValueError as exc:
            msg = f"Receipt response for {receipt_id!r} is not valid JSON"
            raise TransportError(
                msg, status_code=response.status_code, correlation_id=receipt_id
            ) from exc
        if not isinstance(body, dict):
            msg = f"Receipt response for {receipt_id!r} is not a JSON object"
            raise TransportError(msg, status_code=response.status_code, correlation_id=receipt_id)

        errors = body.get("errors")
        if errors:
            messages = "; ".join(str(e.get("message", e)) for e in errors if isinstance(e, dict))
            msg = f"Receipt query for {receipt_id!r} failed: {messages or errors}"
            raise TransportError(
                msg,
                status_code=response.status_code,
                graphql_errors=tuple(e for e in errors if isinstance(e, dict)),
                correlation_id=receipt_id,
            )

        data = ((body.get("data") or {}).get("backgroundJobReceipt") or {}).get("byId")
        if data is None:
            logger.debug("Receipt query returned null | receipt_id=%s", receipt_id)
            return None

        try:
            return ReceiptPayload.model_validate(data).to_receipt()
        except (pydantic.ValidationError, ModelValidationError) as exc:
            msg = f"Receipt {receipt_id!r} does not match the receipt fragment: {exc}"
            raise ContractError(msg, stage="fetch_receipt", correlation_id=receipt_id) from exc

    async def aclose(self) -> None:
        """Close the underlying client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GraphQLReceiptFetcher:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _graphql_errors(response: httpx.Response) -> tuple[dict[str, Any], ...]:
    """Best-effort extraction of GraphQL ``errors`` from an error response."""
    try:
        body = response.json()
    except ValueError:
        return ()
    if not isinstance(body, dict):
        return ()
    errors = body.get("errors") or []
    return tuple(e for e in errors if isinstance(e, dict))
