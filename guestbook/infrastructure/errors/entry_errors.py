from fastapi import status

from guestbook.infrastructure.errors.base import GuestbookError, NotFoundError
from guestbook.utils.enums import ErrorTag


class SpamCodeMismatch(GuestbookError):
    """Anti-spam code does not match the configured one"""
    status_code = status.HTTP_400_BAD_REQUEST
    tag = ErrorTag.CODE


class EntryValidationError(GuestbookError):
    """Any field outside its bounds; the caller never learns which one"""
    status_code = status.HTTP_400_BAD_REQUEST
    tag = ErrorTag.VALIDATION


class PostLimitExceeded(GuestbookError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    tag = ErrorTag.POST_LIMIT


class EntryNotFound(NotFoundError):
    pass


class EntryDecisionConflict(GuestbookError):
    """Approving a rejected entry or rejecting an approved one"""
    status_code = status.HTTP_409_CONFLICT
    tag = ErrorTag.CONFLICT
