from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from guestbook.infrastructure.database.models.base import Base
from guestbook.utils.enums import ApprovalStateEnum


class Entry(Base):
    __tablename__ = "entries"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    email: Mapped[str] = mapped_column(Text)
    message: Mapped[str] = mapped_column(Text)
    ip: Mapped[str] = mapped_column(Text, index=True)
    approved: Mapped[int] = mapped_column(
        Integer,
        default=ApprovalStateEnum.PENDING,
        server_default=str(int(ApprovalStateEnum.PENDING)),
    )
    comment: Mapped[str] = mapped_column(Text, default="", server_default="")
    # stored as naive UTC
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.current_timestamp(),
    )

    def __repr__(self):
        return f"<Entry(name='{self.name}', approved={self.approved})>"
