"""Background job processing with ARQ.

Runs scheduled maintenance, currently the expired-session sweep.
"""

from gatekeeper.core.jobs.worker import WorkerSettings


__all__ = [
    "WorkerSettings",
]
