from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

import guestbook.core.repositories as repositories
import guestbook.core.services as services


async def get_db_session(
    request: Request,
) -> AsyncGenerator[AsyncSession, None]:
    session = await request.app.state.db_connection.get_session()
    try:
        yield session
    finally:
        await session.close()


async def get_entry_service(
    request: Request,
    session=Depends(get_db_session),
) -> services.EntryService:
    return services.EntryService(
        repository=repositories.EntryRepository(session=session),
        notifier=request.app.state.notifier,
        config=request.app.state.config.app,
        clock=request.app.state.clock,
    )
