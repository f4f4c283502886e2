from email.message import EmailMessage
from typing import NamedTuple

import aiosmtplib

from guestbook.infrastructure.config.config import AppConfig, SmtpConfig
from guestbook.infrastructure.errors.base import NotificationError
from guestbook.infrastructure.logging import get_logger
from guestbook.utils.enums import NotificationEventEnum


logger = get_logger(__name__)


class MailTemplate(NamedTuple):
    subject: str
    body: str


MAIL_TEMPLATES = {
    NotificationEventEnum.ENTRY_ADDED: MailTemplate(
        subject="Neuer Gästebuch-Eintrag",
        body="Neuer Gästebucheintrag, bitte prüfen und freischalten: {url}",
    ),
    NotificationEventEnum.ENTRY_APPROVED: MailTemplate(
        subject="Gästebuch-Eintrag freigeschaltet",
        body="Dein Gästebuch-Eintrag wurde freigeschaltet: {url}",
    ),
    NotificationEventEnum.ENTRY_COMMENTED: MailTemplate(
        subject="Gästebuch-Eintrag kommentiert",
        body="Dein Gästebuch-Eintrag wurde kommentiert: {url}",
    ),
}


class EmailNotifier:

    def __init__(self, smtp_config: SmtpConfig, app_config: AppConfig):
        self.smtp_config = smtp_config
        self.app_config = app_config

    @property
    def from_address(self) -> str:
        return self.smtp_config.SMTP_FROM or self.app_config.ADMIN_EMAIL

    def _build_message(self, to: str, event: NotificationEventEnum, url: str) -> EmailMessage:
        template = MAIL_TEMPLATES[event]
        message = EmailMessage()
        message["From"] = self.from_address
        message["To"] = to
        message["Subject"] = template.subject
        message.set_content(template.body.format(url=url), charset="utf-8")
        return message

    async def _deliver(self, message: EmailMessage) -> None:
        use_tls_direct = self.smtp_config.SMTP_USE_TLS and self.smtp_config.SMTP_PORT == 465
        start_tls = self.smtp_config.SMTP_USE_TLS and not use_tls_direct

        try:
            await aiosmtplib.send(
                message,
                hostname=self.smtp_config.SMTP_HOST,
                port=self.smtp_config.SMTP_PORT,
                username=self.smtp_config.SMTP_USER,
                password=self.smtp_config.SMTP_PASS,
                use_tls=use_tls_direct,
                start_tls=start_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            raise NotificationError(str(exc)) from exc

    async def send(self, to: str, event: NotificationEventEnum, url: str) -> bool:
        """
        Best-effort delivery of one templated notice.

        Transport errors are logged and swallowed; the return value only
        tells whether the message was handed over to the SMTP server.
        """
        if not to:
            logger.warning("email_skipped", reason="empty_recipient", notification=event.value)
            return False

        try:
            await self._deliver(self._build_message(to, event, url))
        except NotificationError as exc:
            logger.error(
                "email_send_failed",
                notification=event.value,
                recipient=to,
                error=str(exc),
            )
            return False

        logger.info("email_sent", notification=event.value, recipient=to)
        return True

    async def notify_admin_entry_added(self, entry_id: str) -> bool:
        return await self.send(
            self.app_config.ADMIN_EMAIL,
            NotificationEventEnum.ENTRY_ADDED,
            self.app_config.get_moderation_url(entry_id),
        )

    async def notify_author_approved(self, email: str) -> bool:
        return await self.send(email, NotificationEventEnum.ENTRY_APPROVED, self.app_config.URL)

    async def notify_author_commented(self, email: str) -> bool:
        return await self.send(email, NotificationEventEnum.ENTRY_COMMENTED, self.app_config.URL)
