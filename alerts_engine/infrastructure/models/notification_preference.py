"""SQLAlchemy model for stored preference documents."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint

from alerts_engine.infrastructure.database import Base
from alerts_engine.utils import now_in_app_naive_datetime


class NotificationPreferenceModel(Base):
    """One JSON document per ``(user_id, preference_key)``."""

    __tablename__ = "notification_preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    preference_key = Column(String(64), nullable=False)
    preference_value = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_app_naive_datetime)

    __table_args__ = (
        UniqueConstraint("user_id", "preference_key", name="uq_notification_preferences_user_key"),
    )


__all__ = ["NotificationPreferenceModel"]
