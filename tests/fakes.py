"""Test doubles shared across the job poller test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from job_poller.fetchers.base import ReceiptFetcher
from job_poller.models.receipt import BackgroundJobResultType, BackgroundJobState, JobReceipt

RECEIPT_ID = "123"

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class ScriptedFetcher(ReceiptFetcher):
    """Fetcher that replays a fixed script of receipts / exceptions.

    Each ``fetch`` consumes one entry.  With ``repeat_last=True`` the final
    entry is returned forever.  Fetching past the end of the script raises
    ``AssertionError`` so over-polling fails loudly.
    """

    def __init__(
        self,
        script: Iterable[JobReceipt | BaseException | None],
        *,
        repeat_last: bool = False,
        delay: float = 0.0,
    ) -> None:
        self._script = list(script)
        self._repeat_last = repeat_last
        self._delay = delay
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.call_times: list[float] = []

    async def fetch(self, receipt_id: str) -> JobReceipt | None:
        self.calls.append(receipt_id)
        self.call_times.append(asyncio.get_running_loop().time())
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self._delay:
                await asyncio.sleep(self._delay)
            if not self._script:
                msg = f"unexpected fetch #{len(self.calls)} for {receipt_id!r}"
                raise AssertionError(msg)
            if self._repeat_last and len(self._script) == 1:
                item = self._script[0]
            else:
                item = self._script.pop(0)
        finally:
            self.in_flight -= 1
        if isinstance(item, BaseException):
            raise item
        return item


def make_receipt(
    state: BackgroundJobState = BackgroundJobState.IN_PROGRESS,
    *,
    receipt_id: str = RECEIPT_ID,
    will_retry: bool = False,
    tries: int = 0,
    error_message: str | None = None,
) -> JobReceipt:
    """Build a receipt with sensible defaults."""
    return JobReceipt(
        id=receipt_id,
        state=state,
        tries=tries,
        will_retry=will_retry,
        result_type=BackgroundJobResultType.VOID,
        error_message=error_message,
    )


