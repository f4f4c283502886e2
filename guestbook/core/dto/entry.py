from datetime import datetime, timezone

from pydantic import BaseModel, field_validator


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EntryCreateModel(BaseModel):
    # bounds are checked by the validator so that every failure looks the same
    name: str = ""
    email: str = ""
    message: str = ""
    code: str = ""


class EntryCreatedModel(BaseModel):
    success: bool = True


class PublicEntryModel(BaseModel):
    name: str
    message: str
    approved: int
    comment: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, value: datetime) -> datetime:
        return _as_utc(value)


class EntryModel(PublicEntryModel):
    id: str
    email: str


class EntryCommentModel(BaseModel):
    comment: str


class ApprovalChange(BaseModel):
    previous: int
    email: str


class CommentChange(BaseModel):
    first_comment: bool
    email: str
