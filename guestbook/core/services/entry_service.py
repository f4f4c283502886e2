import secrets
from datetime import datetime, timezone
from typing import Callable

from guestbook.core.dto.entry import EntryCreateModel, EntryModel, PublicEntryModel
from guestbook.core.rate_limit import ensure_submission_allowed
from guestbook.core.repositories.entry_repository import EntryRepository
from guestbook.core.validation import validate_comment, validate_entry_fields
from guestbook.infrastructure.config.config import AppConfig
from guestbook.infrastructure.database.models.entry import Entry
from guestbook.infrastructure.email.sender import EmailNotifier
from guestbook.infrastructure.errors.entry_errors import (
    EntryDecisionConflict,
    EntryNotFound,
    SpamCodeMismatch,
)
from guestbook.infrastructure.logging import get_logger
from guestbook.utils.enums import ApprovalStateEnum
from guestbook.utils.identifiers import generate_entry_id


logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EntryService:

    def __init__(
        self,
        repository: EntryRepository,
        notifier: EmailNotifier,
        config: AppConfig,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.notifier = notifier
        self.config = config
        self.clock = clock

    def _check_spam_code(self, code: str) -> None:
        if not secrets.compare_digest(
            code.encode("utf-8"),
            self.config.ANTI_SPAM_CODE.encode("utf-8"),
        ):
            raise SpamCodeMismatch()

    async def submit_entry(self, data: EntryCreateModel, origin: str) -> None:
        self._check_spam_code(data.code)
        validate_entry_fields(data.name, data.email, data.message)

        now = self.clock()
        last_submission = await self.repository.get_last_submission_time(origin)
        ensure_submission_allowed(last_submission, now, self.config.entry_wait)

        entry_id = generate_entry_id()
        await self.repository.add_entry(
            Entry(
                id=entry_id,
                name=data.name,
                email=data.email,
                message=data.message,
                ip=origin,
                approved=ApprovalStateEnum.PENDING,
                comment="",
                created_at=now.astimezone(timezone.utc).replace(tzinfo=None),
            )
        )
        logger.info("entry_created", entry_id=entry_id)

        await self.notifier.notify_admin_entry_added(entry_id)

    async def get_approved_entries(self) -> list[PublicEntryModel]:
        entries = await self.repository.get_approved_entries()
        return [PublicEntryModel.model_validate(entry, from_attributes=True) for entry in entries]

    async def get_entry(self, entry_id: str) -> EntryModel:
        entry = await self.repository.get_entry(entry_id)
        if entry is None:
            raise EntryNotFound()
        return EntryModel.model_validate(entry, from_attributes=True)

    async def approve_entry(self, entry_id: str) -> None:
        change = await self.repository.set_approved(entry_id, ApprovalStateEnum.APPROVED)
        if change is None:
            raise EntryNotFound()
        self._ensure_consistent_decision(entry_id, change.previous, ApprovalStateEnum.APPROVED)

        if change.previous == ApprovalStateEnum.PENDING and change.email:
            await self.notifier.notify_author_approved(change.email)

    async def reject_entry(self, entry_id: str) -> None:
        change = await self.repository.set_approved(entry_id, ApprovalStateEnum.REJECTED)
        if change is None:
            raise EntryNotFound()
        self._ensure_consistent_decision(entry_id, change.previous, ApprovalStateEnum.REJECTED)

    def _ensure_consistent_decision(
        self,
        entry_id: str,
        previous: int,
        decision: ApprovalStateEnum,
    ) -> None:
        if previous == ApprovalStateEnum.PENDING:
            logger.info("entry_decided", entry_id=entry_id, decision=decision.name.lower())
        elif previous != decision:
            logger.warning(
                "entry_decision_conflict",
                entry_id=entry_id,
                current=ApprovalStateEnum(previous).name.lower(),
                requested=decision.name.lower(),
            )
            raise EntryDecisionConflict()

    async def comment_entry(self, entry_id: str, text: str) -> None:
        validate_comment(text)

        change = await self.repository.set_comment(entry_id, text)
        if change is None:
            raise EntryNotFound()
        logger.info("entry_commented", entry_id=entry_id, first_comment=change.first_comment)

        if change.first_comment and change.email:
            await self.notifier.notify_author_commented(change.email)
