"""Shared pytest fixtures for the job poller test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from job_poller.models.receipt import BackgroundJobState, JobReceipt
from tests.fakes import make_receipt

# ---------------------------------------------------------------------------
# Receipt fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def receipt_factory() -> Callable[..., JobReceipt]:
    """Return the ``make_receipt`` builder."""
    return make_receipt


@pytest.fixture()
def in_progress_receipt() -> JobReceipt:
    return make_receipt(BackgroundJobState.IN_PROGRESS)


@pytest.fixture()
def success_receipt() -> JobReceipt:
    return make_receipt(BackgroundJobState.SUCCESS)
