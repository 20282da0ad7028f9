"""ARQ worker configuration.

Defines the worker settings including registered jobs,
cron schedules, and startup/shutdown hooks.
"""

from typing import Any, ClassVar

import structlog
from arq import cron

from gatekeeper.config import settings
from gatekeeper.core.database import Database
from gatekeeper.core.jobs.tasks import cleanup_expired_sessions
from gatekeeper.core.jobs.utils import get_redis_settings
from gatekeeper.core.logging import configure_logging


async def startup(ctx: dict[str, Any]) -> None:
    """Initialize resources for the worker.

    Called once when the worker starts. Builds the Database that jobs
    read from ``ctx["database"]``.

    Args:
        ctx: Worker context dict (shared across all jobs)
    """
    configure_logging(settings)
    log = structlog.get_logger()
    log.info("worker_startup", environment=settings.environment)

    ctx["database"] = Database.from_settings(settings, pool_size=5, max_overflow=10)

    log.info("worker_startup_complete")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Cleanup resources when the worker stops.

    Args:
        ctx: Worker context dict
    """
    log = structlog.get_logger()
    log.info("worker_shutdown")

    database: Database | None = ctx.get("database")
    if database:
        await database.dispose()
        log.info("database_engine_disposed")

    log.info("worker_shutdown_complete")


class WorkerSettings:
    """ARQ worker settings.

    Run the worker with:
        arq gatekeeper.core.jobs.worker.WorkerSettings
    """

    # Registered job functions
    functions: ClassVar[list[Any]] = [
        cleanup_expired_sessions,
    ]

    # Cron jobs (scheduled tasks)
    cron_jobs: ClassVar[list[Any]] = [
        # Purge expired sessions daily at 3 AM
        cron(cleanup_expired_sessions, hour=3, minute=0),
    ]

    # Worker lifecycle hooks
    on_startup = startup
    on_shutdown = shutdown

    # Redis connection
    redis_settings = get_redis_settings()

    # Worker configuration
    max_jobs = 10  # Maximum concurrent jobs
    job_timeout = 300  # 5 minutes per job
    keep_result = 3600  # Keep results for 1 hour
    retry_jobs = True  # Retry failed jobs
    max_tries = 3  # Maximum retry attempts
