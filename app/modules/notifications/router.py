from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.db import get_db
from app.schemas.notifications import (
    ActorOut,
    MarkAllReadResponse,
    MarkReadResponse,
    NotificationListResponse,
    NotificationOut,
    UnreadCountResponse,
)
from .service import NotificationView, list_notifications, mark_all_read, mark_read, unread_count

router = APIRouter(prefix="/v1/notifications", tags=["notifications"])


def _notification_out(view: NotificationView) -> NotificationOut:
    n = view.notification
    return NotificationOut(
        id=n.id,
        type=n.type,
        title=n.title,
        body=n.body,
        metadata=n.metadata_ or {},
        read=n.read,
        created_at=n.created_at,
        actor=ActorOut(id=n.actor_id, name=view.actor_name) if n.actor_id else None,
        notifiable_kind=n.notifiable_kind,
        notifiable_id=n.notifiable_id,
        notifiable_status=view.notifiable_status,
    )


@router.get("", response_model=NotificationListResponse)
def notification_list(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    result = list_notifications(db, user_id)
    return NotificationListResponse(
        notifications=[_notification_out(v) for v in result.items],
        unread_count=result.unread_count,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def notification_unread_count(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return UnreadCountResponse(unread_count=unread_count(db, user_id))


@router.patch("/read-all", response_model=MarkAllReadResponse)
def notification_mark_all_read(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    updated = mark_all_read(db, user_id)
    return MarkAllReadResponse(updated=updated, unread_count=unread_count(db, user_id))


@router.patch("/{notification_id}/read", response_model=MarkReadResponse)
def notification_mark_read(
    notification_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    n = mark_read(db, notification_id, user_id)
    return MarkReadResponse(id=n.id, read=n.read)
