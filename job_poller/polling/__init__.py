"""Polling state machine for background-job receipts."""

from job_poller.polling.errors import BackgroundJobPollError, PollErrorType
from job_poller.polling.options import (
    PollErrorDecision,
    PollOptions,
    not_found_indicates_success,
)
from job_poller.polling.poller import (
    JobReceiptPoller,
    OutcomeKind,
    PollOutcome,
    poll_for_completion,
    poll_for_outcome,
    start_polling,
)

__all__ = [
    "BackgroundJobPollError",
    "JobReceiptPoller",
    "OutcomeKind",
    "PollErrorDecision",
    "PollErrorType",
    "PollOptions",
    "PollOutcome",
    "not_found_indicates_success",
    "poll_for_completion",
    "poll_for_outcome",
    "start_polling",
]
