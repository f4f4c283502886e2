from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from guestbook.infrastructure.config.config import DatabaseConfig
from guestbook.infrastructure.database.models.base import Base


class DatabaseConnection:
    def __init__(self, config: DatabaseConfig):
        self._engine = create_async_engine(
            url=config.get_url(is_async=True)
        )
        self._session_maker = async_sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
        )

    async def get_session(self) -> AsyncSession:
        return self._session_maker()

    async def create_schema(self) -> None:
        async with self._engine.begin() as connection:
            await connection.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self._engine.dispose()
