"""Background-job completion poller.

Waits for a server-executed job to reach a terminal state by fetching
its receipt on a fixed interval.  Each invocation is one
``JobReceiptPoller`` that owns its own tick counter and deadline and
runs as a self-rescheduling loop: the next tick is not scheduled until
the current fetch and classification have finished, so at most one
fetch is outstanding per invocation.

Tick classification, in order:
    1. transport error   -> escape hook says success: ASSUMED_SUCCESS,
                            otherwise NULL_RECEIPT
    2. no receipt        -> NULL_RECEIPT
    3. FAILURE, no retry -> JOB_FAILED_NO_WILL_RETRY
    4. checks > budget   -> TIMEOUT
    5. SUCCESS           -> SUCCESS
    6. anything else     -> keep polling (checks += 1)

``FAILURE`` with ``will_retry=True`` falls through to step 6.  Because
the budget check precedes the success check and uses ``>``, a poll
observes ``max_attempts + 1`` non-terminal receipts and fails on the
next tick.

Entry points:
    - ``poll_for_outcome``    - three-way ``PollOutcome``, never raises for
      job failures.
    - ``poll_for_completion`` - receipt, ``None`` for an assumed success,
      or raises ``BackgroundJobPollError``.
    - ``start_polling``       - ``poll_for_completion`` as a caller-owned
      ``asyncio.Task``; ``task.cancel()`` aborts the poll.
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, overload

from job_poller.fetchers.base import TransportError
from job_poller.polling.errors import BackgroundJobPollError, PollErrorType
from job_poller.polling.options import PollOptions

if TYPE_CHECKING:
    from job_poller.fetchers.base import ReceiptFetcher
    from job_poller.models.receipt import JobReceipt

logger = logging.getLogger("job_poller.polling.poller")


# ---------------------------------------------------------------------------
# Outcome
# ---------------------------------------------------------------------------


class OutcomeKind(enum.Enum):
    """How a poll invocation ended.

    Values:
        SUCCESS:         The server reported ``SUCCESS``; ``receipt`` is set.
        ASSUMED_SUCCESS: A transport error was classified as success by
                         the escape hook; no receipt is available.
        FAILED:          A terminal failure; ``error`` is set.
    """

    SUCCESS = "success"
    ASSUMED_SUCCESS = "assumed_success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PollOutcome:
    """Settled result of one poll invocation.

    Attributes:
        kind: Which terminal state was reached.
        receipt: The terminal receipt (``SUCCESS``, and the failing
            receipt for ``JOB_FAILED_NO_WILL_RETRY``).
        error: The failure (``FAILED`` only).
        fetches: Number of fetches issued.
    """

    kind: OutcomeKind
    receipt: JobReceipt | None = None
    error: BackgroundJobPollError | None = None
    fetches: int = 0

    @property
    def succeeded(self) -> bool:
        return self.kind is not OutcomeKind.FAILED

    def unwrap(self) -> JobReceipt | None:
        """Return the receipt (``None`` if assumed) or raise the failure."""
        if self.error is not None:
            raise self.error
        return self.receipt


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class JobReceiptPoller:
    """One poll invocation for one receipt.

    Instances share nothing with each other; a single fetcher may be
    reused across any number of concurrent pollers.
    """

    def __init__(
        self,
        fetcher: ReceiptFetcher,
        initial_receipt: JobReceipt,
        options: PollOptions | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._receipt_id = initial_receipt.id
        self._initial_state = initial_receipt.state
        self._options = options or PollOptions()
        self._num_checks = 0
        self._fetches = 0
        self._outcome: PollOutcome | None = None

    @property
    def receipt_id(self) -> str:
        return self._receipt_id

    @property
    def num_checks(self) -> int:
        """Non-terminal receipts observed so far."""
        return self._num_checks

    @property
    def fetches(self) -> int:
        return self._fetches

    @property
    def outcome(self) -> PollOutcome | None:
        """The settled outcome, or ``None`` while still polling."""
        return self._outcome

    async def run(self) -> PollOutcome:
        """Poll until a terminal state is reached.

        Raises:
            RuntimeError: If this poller already ran.
            asyncio.CancelledError: If the awaiting task is cancelled.
            Exception: Any non-transport error from the fetcher or the
                escape hook propagates unchanged.
        """
        if self._outcome is not None or self._fetches:
            msg = f"Poller for receipt {self._receipt_id!r} has already run"
            raise RuntimeError(msg)

        opts = self._options
        loop = asyncio.get_running_loop()
        deadline = loop.time() + opts.max_duration if opts.max_duration is not None else None

        logger.info(
            "poll started | receipt_id=%s | initial_state=%s | interval=%.2fs | "
            "max_attempts=%d | max_duration=%s",
            self._receipt_id,
            self._initial_state.value,
            opts.poll_interval,
            opts.max_attempts,
            opts.max_duration,
        )

        tick_started = loop.time()
        try:
            while True:
                delay = max(0.0, opts.poll_interval - (loop.time() - tick_started))
                if deadline is not None and loop.time() + delay >= deadline:
                    await asyncio.sleep(max(0.0, deadline - loop.time()))
                    return self._settle(self._failure(PollErrorType.DEADLINE_EXCEEDED))
                await asyncio.sleep(delay)

                tick_started = loop.time()
                outcome = await self._tick(deadline)
                if outcome is not None:
                    return self._settle(outcome)
        except asyncio.CancelledError:
            logger.info(
                "poll cancelled | receipt_id=%s | fetches=%d | checks=%d",
                self._receipt_id,
                self._fetches,
                self._num_checks,
            )
            raise

    async def _tick(self, deadline: float | None) -> PollOutcome | None:
        """Fetch once and classify.  Returns ``None`` to keep polling."""
        self._fetches += 1
        timeout = asyncio.timeout_at(deadline)
        try:
            async with timeout:
                receipt = await self._fetcher.fetch(self._receipt_id)
        except TransportError as exc:
            return await self._classify_transport_error(exc)
        except TimeoutError:
            if not timeout.expired():
                raise
            return self._failure(PollErrorType.DEADLINE_EXCEEDED)

        if receipt is None:
            return self._failure(PollErrorType.NULL_RECEIPT)

        logger.debug(
            "poll tick | receipt_id=%s | fetch=%d | checks=%d | state=%s | tries=%d | will_retry=%s",
            self._receipt_id,
            self._fetches,
            self._num_checks,
            receipt.state.value,
            receipt.tries,
            receipt.will_retry,
        )

        if receipt.is_fatal_failure:
            return self._failure(
                PollErrorType.JOB_FAILED_NO_WILL_RETRY,
                receipt=receipt,
                receipt_error_message=receipt.error_message,
            )

        # Budget is checked before success and compared with ``>``.
        if self._num_checks > self._options.max_attempts:
            return self._failure(PollErrorType.TIMEOUT, receipt=receipt)

        if receipt.is_success:
            return PollOutcome(OutcomeKind.SUCCESS, receipt=receipt, fetches=self._fetches)

        self._num_checks += 1
        return None

    async def _classify_transport_error(self, exc: TransportError) -> PollOutcome:
        hook = self._options.on_poll_error
        if hook is not None:
            decision = hook(exc)
            if inspect.isawaitable(decision):
                decision = await decision
            if decision is not None and decision.error_indicates_success:
                logger.info(
                    "transport error treated as success | receipt_id=%s | error=%s",
                    self._receipt_id,
                    exc,
                )
                return PollOutcome(OutcomeKind.ASSUMED_SUCCESS, fetches=self._fetches)

        logger.warning(
            "receipt fetch failed | receipt_id=%s | fetch=%d | status=%s | error=%s",
            self._receipt_id,
            self._fetches,
            exc.status_code,
            exc,
        )
        outcome = self._failure(PollErrorType.NULL_RECEIPT)
        if outcome.error is not None:
            outcome.error.__cause__ = exc
        return outcome

    def _failure(
        self,
        error_type: PollErrorType,
        *,
        receipt: JobReceipt | None = None,
        receipt_error_message: str | None = None,
    ) -> PollOutcome:
        error = BackgroundJobPollError(
            error_type,
            receipt_id=self._receipt_id,
            receipt_error_message=receipt_error_message,
            max_duration=self._options.max_duration,
        )
        return PollOutcome(OutcomeKind.FAILED, receipt=receipt, error=error, fetches=self._fetches)

    def _settle(self, outcome: PollOutcome) -> PollOutcome:
        self._outcome = outcome
        if outcome.error is not None:
            logger.warning(
                "poll failed | receipt_id=%s | error_type=%s | fetches=%d | checks=%d | message=%s",
                self._receipt_id,
                outcome.error.error_type.value,
                outcome.fetches,
                self._num_checks,
                outcome.error.message,
            )
        else:
            logger.info(
                "poll completed | receipt_id=%s | outcome=%s | fetches=%d | checks=%d",
                self._receipt_id,
                outcome.kind.value,
                outcome.fetches,
                self._num_checks,
            )
        return outcome


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def poll_for_outcome(
    fetcher: ReceiptFetcher,
    initial_receipt: JobReceipt,
    options: PollOptions | None = None,
) -> PollOutcome:
    """Poll *initial_receipt* to completion and return the three-way outcome.

    Job failures, timeouts and null receipts are returned as
    ``OutcomeKind.FAILED`` rather than raised.
    """
    return await JobReceiptPoller(fetcher, initial_receipt, options).run()


@overload
async def poll_for_completion(
    fetcher: ReceiptFetcher,
    initial_receipt: JobReceipt,
    options: None = None,
) -> JobReceipt: ...


@overload
async def poll_for_completion(
    fetcher: ReceiptFetcher,
    initial_receipt: JobReceipt,
    options: PollOptions,
) -> JobReceipt | None: ...


async def poll_for_completion(
    fetcher: ReceiptFetcher,
    initial_receipt: JobReceipt,
    options: PollOptions | None = None,
) -> JobReceipt | None:
    """Poll *initial_receipt* until the job completes.

    Args:
        fetcher: Receipt source.
        initial_receipt: Receipt returned when the job was scheduled;
            only its ``id`` is used.
        options: Interval, limits and escape hook.

    Returns:
        The ``SUCCESS`` receipt, or ``None`` when ``options.on_poll_error``
        classified a transport error as success.

    Raises:
        BackgroundJobPollError: On a null receipt, a final job failure,
            an exhausted tick budget or an exceeded deadline.
    """
    outcome = await poll_for_outcome(fetcher, initial_receipt, options)
    return outcome.unwrap()


def start_polling(
    fetcher: ReceiptFetcher,
    initial_receipt: JobReceipt,
    options: PollOptions | None = None,
    *,
    name: str | None = None,
) -> asyncio.Task[JobReceipt | None]:
    """Run ``poll_for_completion`` as a task owned by the caller.

    Must be called from a running event loop.  Cancelling the task stops
    polling at its next suspension point.
    """
    return asyncio.create_task(
        poll_for_completion(fetcher, initial_receipt, options),
        name=name or f"poll-receipt:{initial_receipt.id}",
    )
