from fastapi import status

from guestbook.utils.enums import ErrorTag


class GuestbookError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    tag = ErrorTag.INTERNAL

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.tag.value)
        self.detail = detail


class NotFoundError(GuestbookError):
    status_code = status.HTTP_404_NOT_FOUND
    tag = ErrorTag.NOT_FOUND


class StorageError(GuestbookError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    tag = ErrorTag.STORAGE


class NotificationError(Exception):
    """Raised by the mail transport; the notifier always catches it."""
