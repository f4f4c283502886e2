from typing import Any, Generic, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.infrastructure.database.models.base import Base
from guestbook.infrastructure.errors.base import StorageError


ModelType = TypeVar("ModelType", bound=Base)


class SqlAlchemyRepository(Generic[ModelType]):

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def add_item(self, item: ModelType) -> ModelType:
        self.session.add(item)
        try:
            await self.session.commit()
        except IntegrityError as exc:
            await self.session.rollback()
            raise StorageError(f"{self.model.__tablename__}: duplicate key") from exc
        await self.session.refresh(item)
        return item

    async def get_item(self, item_id: Any) -> ModelType | None:
        return await self.session.get(self.model, item_id)
