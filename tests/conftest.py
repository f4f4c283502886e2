import re
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from guestbook.application import create_app
from guestbook.infrastructure.config.config import (
    AppConfig,
    DatabaseConfig,
    GuestbookConfig,
    SmtpConfig,
)


ANTI_SPAM_CODE = "s3cret-code"
ADMIN_EMAIL = "admin@example.com"
PUBLIC_URL = "https://example.com/guestbook"
ENTRY_WAIT_SECONDS = 60

ENTRY_ID_RE = re.compile(r"GgbEntryID=([0-9a-f]{64})")


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def config(tmp_path) -> GuestbookConfig:
    return GuestbookConfig(
        app=AppConfig(
            LISTEN=":8080",
            URL=PUBLIC_URL,
            ADMIN_EMAIL=ADMIN_EMAIL,
            ANTI_SPAM_CODE=ANTI_SPAM_CODE,
            ENTRY_WAIT_SECONDS=ENTRY_WAIT_SECONDS,
        ),
        db=DatabaseConfig(DB_FILE=str(tmp_path / "guestbook.db")),
        smtp=SmtpConfig(
            SMTP_HOST="smtp.example.com",
            SMTP_PORT=587,
            SMTP_USER="mailer",
            SMTP_PASS="mailer-pass",
        ),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mail_mock():
    with patch(
        "guestbook.infrastructure.email.sender.aiosmtplib.send",
        new_callable=AsyncMock,
    ) as mocked:
        yield mocked


@pytest.fixture
def app(config, clock, mail_mock):
    return create_app(config, clock=clock)


@pytest_asyncio.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
            yield ac


def sent_messages(mail_mock, recipient: str | None = None) -> list:
    messages = [call.args[0] for call in mail_mock.await_args_list]
    if recipient is None:
        return messages
    return [message for message in messages if message["To"] == recipient]


def entry_id_from_admin_mail(mail_mock) -> str:
    admin_messages = sent_messages(mail_mock, ADMIN_EMAIL)
    assert admin_messages, "no moderation mail was sent"
    match = ENTRY_ID_RE.search(admin_messages[-1].get_content())
    assert match is not None
    return match.group(1)


def entry_payload(**overrides) -> dict:
    payload = {
        "name": "Alice Smith",
        "email": "alice@example.com",
        "message": "Hello there, this is my message.",
        "code": ANTI_SPAM_CODE,
    }
    payload.update(overrides)
    return payload
