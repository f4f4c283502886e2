from datetime import datetime, timedelta, timezone

from fastapi import Request

from guestbook.infrastructure.errors.entry_errors import PostLimitExceeded


FORWARDED_FOR_HEADER = "X-Forwarded-For"


def resolve_client_address(request: Request) -> str:
    """
    Address the submission is attributed to.

    A reverse proxy puts the original client first in ``X-Forwarded-For``;
    without the header the peer address of the connection is used.
    """
    forwarded_for = request.headers.get(FORWARDED_FOR_HEADER, "")
    client_ip = forwarded_for.split(",")[0].strip()
    if client_ip:
        return client_ip
    if request.client is not None:
        return request.client.host
    return ""


def ensure_submission_allowed(
    last_submission: datetime | None,
    now: datetime,
    min_wait: timedelta,
) -> None:
    if last_submission is None:
        return

    # SQLite hands timestamps back without tzinfo, they are UTC
    if last_submission.tzinfo is None:
        last_submission = last_submission.replace(tzinfo=timezone.utc)

    if now - last_submission < min_wait:
        raise PostLimitExceeded()
