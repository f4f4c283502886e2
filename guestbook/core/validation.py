import re

from guestbook.infrastructure.errors.entry_errors import EntryValidationError
from guestbook.infrastructure.logging import get_logger


logger = get_logger(__name__)

NAME_MIN_LEN = 3
NAME_MAX_LEN = 100
EMAIL_MIN_LEN = 6
EMAIL_MAX_LEN = 100
MESSAGE_MIN_LEN = 10
MESSAGE_MAX_LEN = 2000
COMMENT_MAX_LEN = 2000

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")


def _length_within(value: str, min_len: int, max_len: int) -> bool:
    return min_len <= len(value) <= max_len


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_entry_fields(name: str, email: str, message: str) -> None:
    if not _length_within(name, NAME_MIN_LEN, NAME_MAX_LEN):
        reason = "name_length"
    elif not _length_within(email, EMAIL_MIN_LEN, EMAIL_MAX_LEN):
        reason = "email_length"
    elif not _length_within(message, MESSAGE_MIN_LEN, MESSAGE_MAX_LEN):
        reason = "message_length"
    elif not is_valid_email(email):
        reason = "email_format"
    else:
        return

    # the reason stays in the log, the client only sees "validation"
    logger.debug("entry_validation_failed", reason=reason)
    raise EntryValidationError()


def validate_comment(text: str) -> None:
    if not text.strip() or len(text) > COMMENT_MAX_LEN:
        logger.debug("comment_validation_failed", length=len(text))
        raise EntryValidationError()
