from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from app.schemas.base import TimestampedSchema
from app.schemas.enums import NotifiableKind, NotificationType


class ActorOut(BaseModel):
    id: str
    name: str


class NotificationOut(TimestampedSchema):
    id: int
    type: NotificationType
    title: str
    body: str
    metadata: Dict[str, Any]
    read: bool
    actor: Optional[ActorOut] = None
    notifiable_kind: Optional[NotifiableKind] = None
    notifiable_id: Optional[int] = None
    notifiable_status: str


class NotificationListResponse(BaseModel):
    notifications: List[NotificationOut]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkReadResponse(BaseModel):
    id: int
    read: bool


class MarkAllReadResponse(BaseModel):
    updated: int
    unread_count: int
