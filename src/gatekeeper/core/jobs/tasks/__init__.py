"""Background job tasks.

Each task module defines async functions that are registered in the
worker.
"""

from gatekeeper.core.jobs.tasks.cleanup import cleanup_expired_sessions


__all__ = [
    "cleanup_expired_sessions",
]
