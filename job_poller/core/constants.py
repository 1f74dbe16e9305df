"""Shared poller constants - single source of truth.

Defaults used by ``PollerConfig``, ``PollOptions`` and the GraphQL
receipt fetcher.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Polling defaults
# ---------------------------------------------------------------------------

DEFAULT_POLL_INTERVAL_SECONDS: float = 1.0
"""Minimum spacing between the start of two consecutive ticks."""

DEFAULT_MAX_ATTEMPTS: int = 90
"""Tick budget.  Compared with ``>`` so ``DEFAULT_MAX_ATTEMPTS + 1``
non-terminal receipts are observed before the poll times out."""

DEFAULT_MAX_DURATION_SECONDS: float = 0.0
"""Wall-clock deadline for one poll invocation; ``0`` disables it."""

# ---------------------------------------------------------------------------
# Receipt API defaults
# ---------------------------------------------------------------------------

DEFAULT_RECEIPT_API_URL: str = "https://api.expo.dev/graphql"
"""GraphQL endpoint serving ``backgroundJobReceipt.byId``."""

DEFAULT_RECEIPT_API_TIMEOUT_SECONDS: float = 30.0
"""Per-request HTTP timeout for receipt fetches."""
