from typing import Any

from guestbook.infrastructure.errors.base import GuestbookError


def error_response(error: type[GuestbookError]) -> dict[int, dict[str, Any]]:
    return {
        error.status_code: {
            "description": error.__doc__ or error.__name__,
            "content": {
                "application/json": {
                    "example": {"error": error.tag.value}
                }
            },
        }
    }
