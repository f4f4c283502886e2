from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.core.dto.entry import ApprovalChange, CommentChange
from guestbook.core.repositories.base import SqlAlchemyRepository
from guestbook.infrastructure.database.models.entry import Entry
from guestbook.utils.enums import ApprovalStateEnum


class EntryRepository(SqlAlchemyRepository[Entry]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Entry)

    async def add_entry(self, entry: Entry) -> Entry:
        return await self.add_item(entry)

    async def get_entry(self, entry_id: str) -> Entry | None:
        return await self.get_item(entry_id)

    async def get_approved_entries(self):
        # id, email and ip are never selected for the public listing
        query = (
            select(
                Entry.name,
                Entry.message,
                Entry.approved,
                Entry.comment,
                Entry.created_at,
            )
            .where(Entry.approved == ApprovalStateEnum.APPROVED)
            .order_by(Entry.created_at.desc())
        )
        result = await self.session.execute(query)
        return result.all()

    async def get_last_submission_time(self, ip: str) -> datetime | None:
        query = (
            select(Entry.created_at)
            .where(Entry.ip == ip)
            .order_by(Entry.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def set_approved(self, entry_id: str, value: ApprovalStateEnum) -> ApprovalChange | None:
        """
        Move a pending entry to ``value`` in one compare-and-set statement.

        Only a row that is still pending is touched, so of two concurrent
        decisions exactly one observes ``previous == PENDING``. When the
        update does not fire the current state is reported unchanged.

        Returns:
            ApprovalChange: state before the call and the author's email,
            or ``None`` if no entry has this id.
        """
        result = await self.session.execute(
            update(Entry)
            .where(
                Entry.id == entry_id,
                Entry.approved == ApprovalStateEnum.PENDING,
            )
            .values(approved=value)
            .execution_options(synchronize_session=False)
        )
        transitioned = result.rowcount == 1

        row = (
            await self.session.execute(
                select(Entry.approved, Entry.email).where(Entry.id == entry_id)
            )
        ).one_or_none()
        await self.session.commit()

        if row is None:
            return None

        previous = ApprovalStateEnum.PENDING if transitioned else row.approved
        return ApprovalChange(previous=previous, email=row.email)

    async def set_comment(self, entry_id: str, text: str) -> CommentChange | None:
        """
        Store the admin comment.

        The first statement only matches an entry without a comment, which
        makes "first comment" a single atomic decision. Later comments
        overwrite the text without counting as first.
        """
        result = await self.session.execute(
            update(Entry)
            .where(Entry.id == entry_id, Entry.comment == "")
            .values(comment=text)
            .execution_options(synchronize_session=False)
        )
        first_comment = result.rowcount == 1

        if not first_comment:
            result = await self.session.execute(
                update(Entry)
                .where(Entry.id == entry_id)
                .values(comment=text)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self.session.rollback()
                return None

        email = (
            await self.session.execute(
                select(Entry.email).where(Entry.id == entry_id)
            )
        ).scalar_one()
        await self.session.commit()

        return CommentChange(first_comment=first_comment, email=email)
