"""Tests for PollOptions validation and the not-found escape hook."""

from __future__ import annotations

import unittest

from job_poller.fetchers.base import TransportError
from job_poller.models.receipt import ModelValidationError
from job_poller.polling.options import (
    PollErrorDecision,
    PollOptions,
    not_found_indicates_success,
)


class TestPollOptions(unittest.TestCase):
    """Defaults and range checks."""

    def test_defaults(self) -> None:
        opts = PollOptions()
        assert opts.poll_interval == 1.0
        assert opts.max_attempts == 90
        assert opts.max_duration is None
        assert opts.on_poll_error is None

    def test_negative_interval_rejected(self) -> None:
        with self.assertRaises(ModelValidationError):
            PollOptions(poll_interval=-0.5)

    def test_negative_budget_rejected(self) -> None:
        with self.assertRaises(ModelValidationError):
            PollOptions(max_attempts=-1)

    def test_non_positive_deadline_rejected(self) -> None:
        for bad in (0, -3.0):
            with self.assertRaises(ModelValidationError):
                PollOptions(max_duration=bad)


class TestNotFoundHook(unittest.TestCase):
    """not_found_indicates_success verdicts."""

    def test_decision_default(self) -> None:
        assert PollErrorDecision().error_indicates_success is False

    def test_http_404(self) -> None:
        decision = not_found_indicates_success(TransportError("gone", status_code=404))
        assert decision.error_indicates_success is True

    def test_graphql_not_found_code(self) -> None:
        err = TransportError(
            "gone",
            graphql_errors=({"message": "m", "extensions": {"errorCode": "ENTITY_NOT_FOUND"}},),
        )
        assert not_found_indicates_success(err).error_indicates_success is True

    def test_other_errors(self) -> None:
        for err in (
            TransportError("down", status_code=503),
            TransportError("x", graphql_errors=({"message": "forbidden"},)),
            TransportError("refused"),
        ):
            assert not_found_indicates_success(err).error_indicates_success is False
