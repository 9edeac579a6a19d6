#!/usr/bin/env python3
"""Delete expired OAuth handshake sessions.

Expired sessions are never served (the store filters on `expires_at`), so
this only reclaims space. Run it from cron.
"""

import asyncio
import sys

import logfire

from arcana.config import Settings, load_settings
from arcana.domain.service import SessionService
from arcana.util.di.container import create_container
from arcana.util.observability import configure_logfire


async def purge(settings: Settings) -> int:
    container = create_container(settings)
    try:
        async with container() as request_container:
            session_service = await request_container.get(SessionService)
            return await session_service.purge_expired()
    finally:
        await container.close()


def main() -> int:
    settings = load_settings()
    configure_logfire(settings)

    try:
        removed = asyncio.run(purge(settings))
        logfire.info("Session purge finished", removed=removed)
        return 0
    except Exception as e:
        logfire.error(
            "Session purge failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
