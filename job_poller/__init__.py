"""Background-job completion poller.

Client-side primitive that waits for a server-executed asynchronous job
(scheduled deletion, export, background mutation) to finish by polling
its receipt until it reaches a terminal state.
"""

__version__ = "0.1.0"
