"""
Notification side effects.

``create_for`` is called only by the ledger, the favorite registry and the
conversation gate, inside their own transaction. It adds the notification to
the caller's session and never commits: the caller's commit persists the
state change and its notification together.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from loguru import logger
from sqlalchemy.orm import Session

from app.core.match_config import MESSAGE_PREVIEW_LENGTH
from app.models.profile import Profile
from app.modules.connections.models import Conversation, Interest, Message
from app.modules.favorites.models import Favorite
from app.modules.notifications.models import Notification
from app.schemas.enums import NotifiableKind, NotificationType


@dataclass
class _Event:
    recipient_id: str
    actor_id: str
    kind: NotifiableKind
    entity_id: int
    title: str
    body: str
    metadata: Dict[str, Any]


def display_name(db: Session, user_id: str) -> str:
    profile = db.get(Profile, user_id)
    if profile and profile.full_name:
        return profile.full_name
    return user_id


def truncate(text: str, length: int = MESSAGE_PREVIEW_LENGTH) -> str:
    if len(text) <= length:
        return text
    return text[: length - 3] + "..."


# ---------- templates ----------

def _interest_received(db: Session, interest: Interest) -> _Event:
    name = display_name(db, interest.sender_id)
    return _Event(
        recipient_id=interest.receiver_id,
        actor_id=interest.sender_id,
        kind=NotifiableKind.interest,
        entity_id=interest.id,
        title="New Connection Request",
        body=f"{name} sent you a connection request",
        metadata={
            "interest_id": interest.id,
            "sender_id": interest.sender_id,
            "sender_name": name,
        },
    )


def _interest_accepted(db: Session, interest: Interest) -> _Event:
    name = display_name(db, interest.receiver_id)
    return _Event(
        recipient_id=interest.sender_id,
        actor_id=interest.receiver_id,
        kind=NotifiableKind.interest,
        entity_id=interest.id,
        title="Connection Request Accepted",
        body=f"{name} accepted your connection request",
        metadata={
            "interest_id": interest.id,
            "receiver_id": interest.receiver_id,
            "receiver_name": name,
        },
    )


def _favorited(db: Session, favorite: Favorite) -> _Event:
    name = display_name(db, favorite.user_id)
    return _Event(
        recipient_id=favorite.favorite_user_id,
        actor_id=favorite.user_id,
        kind=NotifiableKind.favorite,
        entity_id=favorite.id,
        title="Added to Favorites",
        body=f"{name} added you to their favorites",
        metadata={
            "favorite_id": favorite.id,
            "user_id": favorite.user_id,
            "user_name": name,
        },
    )


def _new_message(db: Session, message: Message) -> _Event:
    conversation = db.get(Conversation, message.conversation_id)
    name = display_name(db, message.author_id)
    return _Event(
        recipient_id=conversation.other_user(message.author_id),
        actor_id=message.author_id,
        kind=NotifiableKind.message,
        entity_id=message.id,
        title="New Message",
        body=f"{name}: {truncate(message.body)}",
        metadata={
            "message_id": message.id,
            "conversation_id": conversation.id,
            "sender_id": message.author_id,
            "sender_name": name,
        },
    )


_TEMPLATES: Dict[NotificationType, Callable[[Session, Any], _Event]] = {
    NotificationType.interest_received: _interest_received,
    NotificationType.interest_accepted: _interest_accepted,
    NotificationType.favorited: _favorited,
    NotificationType.new_message: _new_message,
}


def create_for(db: Session, event_type: NotificationType, payload: Any) -> Optional[Notification]:
    """
    Build and stage the notification for ``event_type``.

    ``payload`` must already be flushed (it needs an id). Returns None when
    the computed recipient is the actor itself.
    """
    event = _TEMPLATES[event_type](db, payload)

    if event.recipient_id == event.actor_id:
        logger.debug(f"Notification skipped, recipient is actor | type={event_type.value} user={event.actor_id}")
        return None

    notification = Notification(
        recipient_id=event.recipient_id,
        actor_id=event.actor_id,
        notifiable_kind=event.kind,
        notifiable_id=event.entity_id,
        type=event_type,
        title=event.title,
        body=event.body,
        metadata_=event.metadata,
        read=False,
    )
    db.add(notification)
    db.flush()

    logger.info(
        f"Notification staged | type={event_type.value} recipient={event.recipient_id} "
        f"actor={event.actor_id} {event.kind.value}={event.entity_id}"
    )
    return notification
