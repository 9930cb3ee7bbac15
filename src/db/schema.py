"""Database tables / schema"""

from datetime import datetime, timezone

from sqlalchemy import Index, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBEvent(Base):
    """Append-only event log. The autoincrementing id is the offset (commit order)."""

    __tablename__ = "events"
    __table_args__ = (Index("ix_events_topic_offset", "topic", "id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    topic: Mapped[str]
    key: Mapped[str]
    payload: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
