"""Cleanup tasks for expired data.

Background jobs that purge expired sessions so the sessions table only
holds tokens that can still be used.
"""

from datetime import UTC, datetime
from typing import Any

import structlog

from gatekeeper.core.database import Database
from gatekeeper.modules.users.repos import UserSessionRepository


log = structlog.get_logger()


async def cleanup_expired_sessions(ctx: dict[str, Any]) -> dict[str, int]:
    """Delete sessions whose expiry has passed.

    Expired sessions are already rejected at request time; this job only
    keeps the table small. Scheduled daily at 3 AM.

    Args:
        ctx: Worker context containing the Database

    Returns:
        Dict with the number of deleted sessions
    """
    database: Database = ctx["database"]
    now = datetime.now(UTC)

    async with database.session_factory() as session:
        deleted = await UserSessionRepository(session).delete_expired(now)
        await session.commit()

    log.info("cleanup_expired_sessions_complete", sessions_deleted=deleted)

    return {"sessions_deleted": deleted}
