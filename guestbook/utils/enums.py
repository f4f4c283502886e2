from enum import Enum, IntEnum


class ApprovalStateEnum(IntEnum):
    REJECTED = -1
    PENDING = 0
    APPROVED = 1


class ErrorTag(str, Enum):
    CODE = "code"
    VALIDATION = "validation"
    POST_LIMIT = "postlimit"
    NOT_FOUND = "not-found"
    CONFLICT = "conflict"
    STORAGE = "storage"
    INTERNAL = "internal"


class NotificationEventEnum(str, Enum):
    ENTRY_ADDED = "entry_added"
    ENTRY_APPROVED = "entry_approved"
    ENTRY_COMMENTED = "entry_commented"
