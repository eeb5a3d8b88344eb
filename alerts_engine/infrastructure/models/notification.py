"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import expression

from alerts_engine.infrastructure.database import Base
from alerts_engine.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=True)
    severity = Column(String(20), nullable=False, default="info")
    category = Column(String(50), nullable=True)
    source_type = Column(String(30), nullable=True)
    source_id = Column(String(64), nullable=True)
    dedup_key = Column(String(160), nullable=True)
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    deleted = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_app_naive_datetime)
    read_at = Column(DateTime(), nullable=True)

    __table_args__ = (
        Index("idx_notifications_user_deleted", "user_id", "deleted", "created_at"),
        Index("idx_notifications_dedup", "user_id", "dedup_key"),
    )


__all__ = ["NotificationModel"]
