from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from app.core.db import Base
from app.schemas.enums import InterestStatus


class Interest(Base):
    __tablename__ = "interests"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(String, nullable=False, index=True)
    receiver_id = Column(String, nullable=False, index=True)
    status = Column(
        Enum(InterestStatus, name="interest_status_enum"),
        nullable=False,
        default=InterestStatus.pending,
    )
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("sender_id", "receiver_id", name="uq_interests_sender_receiver"),
        CheckConstraint("sender_id <> receiver_id", name="ck_interests_not_self"),
        # never reuse ids of cancelled interests
        {"sqlite_autoincrement": True},
    )


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(String, nullable=False, index=True)
    receiver_id = Column(String, nullable=False, index=True)

    # sorted copy of (sender_id, receiver_id); one conversation per pair of users
    user_low = Column(String, nullable=False)
    user_high = Column(String, nullable=False)

    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_low", "user_high", name="uq_conversations_pair"),
        CheckConstraint("sender_id <> receiver_id", name="ck_conversations_not_self"),
    )

    def other_user(self, user_id: str) -> str:
        return self.receiver_id if self.sender_id == user_id else self.sender_id

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.sender_id, self.receiver_id)


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(Integer, ForeignKey("conversations.id"), nullable=False, index=True)
    author_id = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
