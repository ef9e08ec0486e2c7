"""
Conversation gate.

The only place that decides whether two users may open a conversation:
an accepted interest must exist between them, in either direction. Once a
conversation exists its participants may keep messaging.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from loguru import logger
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.db import atomic
from app.core.errors import NotConnected, NotFound, SelfReferenceError, ValidationError
from app.core.match_config import MESSAGE_LIST_LIMIT
from app.modules.notifications.dispatcher import create_for
from app.schemas.enums import NotificationType
from .models import Conversation, Message
from .service import accepted_partner_ids, is_connected


@dataclass
class ConversationSummary:
    conversation: Conversation
    other_user_id: str
    last_message: Optional[Message]


def _pair_low_high(a: str, b: str) -> Tuple[str, str]:
    return (a, b) if a < b else (b, a)


def _find_conversation(db: Session, user_a: str, user_b: str) -> Conversation | None:
    low, high = _pair_low_high(user_a, user_b)
    return (
        db.query(Conversation)
        .filter(Conversation.user_low == low, Conversation.user_high == high)
        .first()
    )


def _participant_conversation(db: Session, conversation_id: int, user_id: str) -> Conversation:
    convo = db.get(Conversation, conversation_id)
    if not convo or not convo.has_participant(user_id):
        raise NotFound("Conversation not found")
    return convo


# ---------- CONVERSATIONS ----------

def get_or_create_conversation(db: Session, initiator_id: str, counterpart_id: str) -> Tuple[Conversation, bool]:
    if initiator_id == counterpart_id:
        raise SelfReferenceError("Cannot start a conversation with yourself")

    if not is_connected(db, initiator_id, counterpart_id):
        raise NotConnected("Interest request must be accepted before starting a conversation")

    convo = _find_conversation(db, initiator_id, counterpart_id)
    if convo:
        return convo, False

    low, high = _pair_low_high(initiator_id, counterpart_id)
    convo = Conversation(
        sender_id=initiator_id,
        receiver_id=counterpart_id,
        user_low=low,
        user_high=high,
    )
    try:
        with atomic(db):
            db.add(convo)
    except IntegrityError:
        existing = _find_conversation(db, initiator_id, counterpart_id)
        if existing is None:
            raise
        return existing, False

    db.refresh(convo)
    logger.info(f"Conversation created | id={convo.id} sender={initiator_id} receiver={counterpart_id}")
    return convo, True


def get_conversation(db: Session, conversation_id: int, user_id: str) -> Conversation:
    return _participant_conversation(db, conversation_id, user_id)


def list_conversations(db: Session, user_id: str) -> List[ConversationSummary]:
    convos = (
        db.query(Conversation)
        .filter(or_(Conversation.sender_id == user_id, Conversation.receiver_id == user_id))
        .order_by(Conversation.created_at.desc(), Conversation.id.desc())
        .all()
    )

    out: List[ConversationSummary] = []
    for c in convos:
        last = (
            db.query(Message)
            .filter(Message.conversation_id == c.id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .first()
        )
        out.append(ConversationSummary(conversation=c, other_user_id=c.other_user(user_id), last_message=last))
    return out


def list_connections(db: Session, user_id: str) -> List[str]:
    """Users connected to ``user_id`` by an accepted interest but with no conversation yet."""
    partners = accepted_partner_ids(db, user_id)
    if not partners:
        return []

    rows = (
        db.query(Conversation.sender_id, Conversation.receiver_id)
        .filter(or_(Conversation.sender_id == user_id, Conversation.receiver_id == user_id))
        .all()
    )
    conversing = {r.receiver_id if r.sender_id == user_id else r.sender_id for r in rows}
    return sorted(partners - conversing)


# ---------- MESSAGING ----------

def send_message(db: Session, conversation_id: int, author_id: str, body: str) -> Message:
    if not body or not body.strip():
        raise ValidationError("Message body can't be blank")

    convo = _participant_conversation(db, conversation_id, author_id)

    msg = Message(
        conversation_id=convo.id,
        author_id=author_id,
        body=body,
    )
    with atomic(db):
        db.add(msg)
        db.flush()
        create_for(db, NotificationType.new_message, msg)

    db.refresh(msg)
    logger.info(f"Message sent | id={msg.id} conversation={convo.id} author={author_id}")
    return msg


def list_messages(db: Session, conversation_id: int, user_id: str, limit: int = MESSAGE_LIST_LIMIT) -> List[Message]:
    convo = _participant_conversation(db, conversation_id, user_id)
    return (
        db.query(Message)
        .filter(Message.conversation_id == convo.id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(limit)
        .all()
    )
