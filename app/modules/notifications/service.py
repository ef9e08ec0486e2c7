from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from loguru import logger
from sqlalchemy.orm import Session

from app.core.db import atomic
from app.core.errors import NotFound
from app.core.match_config import NOTIFICATION_LIST_LIMIT
from app.modules.connections.models import Interest, Message
from app.modules.favorites.models import Favorite
from app.schemas.enums import NotifiableKind
from .dispatcher import display_name
from .models import Notification

UNKNOWN_STATUS = "unknown"


@dataclass
class NotificationView:
    notification: Notification
    actor_name: Optional[str]
    notifiable_status: str


@dataclass
class NotificationList:
    items: List[NotificationView]
    unread_count: int


# ---------- notifiable resolvers ----------
# Each returns a status string for the referenced entity, or None when the
# entity no longer exists.

def _interest_status(db: Session, entity_id: int) -> Optional[str]:
    interest = db.get(Interest, entity_id)
    return interest.status.value if interest else None


def _favorite_status(db: Session, entity_id: int) -> Optional[str]:
    return "active" if db.get(Favorite, entity_id) else None


def _message_status(db: Session, entity_id: int) -> Optional[str]:
    return "sent" if db.get(Message, entity_id) else None


_RESOLVERS: Dict[NotifiableKind, Callable[[Session, int], Optional[str]]] = {
    NotifiableKind.interest: _interest_status,
    NotifiableKind.favorite: _favorite_status,
    NotifiableKind.message: _message_status,
}


def resolve_notifiable_status(db: Session, notification: Notification) -> str:
    if notification.notifiable_kind is None or notification.notifiable_id is None:
        return UNKNOWN_STATUS
    resolver = _RESOLVERS.get(notification.notifiable_kind)
    if resolver is None:
        return UNKNOWN_STATUS
    return resolver(db, notification.notifiable_id) or UNKNOWN_STATUS


# ---------- reads ----------

def unread_count(db: Session, owner_id: str) -> int:
    return (
        db.query(Notification)
        .filter(Notification.recipient_id == owner_id, Notification.read.is_(False))
        .count()
    )


def list_notifications(db: Session, owner_id: str, limit: int = NOTIFICATION_LIST_LIMIT) -> NotificationList:
    rows = (
        db.query(Notification)
        .filter(Notification.recipient_id == owner_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(limit)
        .all()
    )

    items = [
        NotificationView(
            notification=n,
            actor_name=display_name(db, n.actor_id) if n.actor_id else None,
            notifiable_status=resolve_notifiable_status(db, n),
        )
        for n in rows
    ]
    return NotificationList(items=items, unread_count=unread_count(db, owner_id))


# ---------- writes ----------

def mark_read(db: Session, notification_id: int, owner_id: str) -> Notification:
    notification = db.get(Notification, notification_id)
    if not notification or notification.recipient_id != owner_id:
        raise NotFound("Notification not found")

    if not notification.read:
        with atomic(db):
            notification.read = True
        db.refresh(notification)

    return notification


def mark_all_read(db: Session, owner_id: str) -> int:
    with atomic(db):
        updated = (
            db.query(Notification)
            .filter(Notification.recipient_id == owner_id, Notification.read.is_(False))
            .update({Notification.read: True}, synchronize_session=False)
        )

    logger.info(f"Notifications marked read | owner={owner_id} count={updated}")
    return updated
