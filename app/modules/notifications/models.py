from sqlalchemy import Boolean, Column, DateTime, Enum, Index, Integer, JSON, String, Text
from sqlalchemy.sql import func

from app.core.db import Base
from app.schemas.enums import NotifiableKind, NotificationType


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(String, nullable=False, index=True)
    actor_id = Column(String, nullable=True)

    # weak reference to the entity that triggered the notification;
    # the target may since have been deleted
    notifiable_kind = Column(Enum(NotifiableKind, name="notifiable_kind_enum"), nullable=True)
    notifiable_id = Column(Integer, nullable=True)

    type = Column(Enum(NotificationType, name="notification_type_enum"), nullable=False)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=False)

    # snapshot taken at event time, never rewritten
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)

    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_notifications_recipient_read", "recipient_id", "read"),
    )
