from typing import List, Optional
from pydantic import BaseModel, Field

from app.schemas.base import TimestampedSchema
from app.schemas.enums import InterestStatus
from app.schemas.profile import ProfileSummary


# ---------- interests ----------
class InterestCreateRequest(BaseModel):
    receiver_id: str = Field(..., min_length=1)


class InterestOut(TimestampedSchema):
    id: int
    sender_id: str
    receiver_id: str
    status: InterestStatus


class InterestCreateResponse(BaseModel):
    interest: InterestOut
    notice: Optional[str] = None


# ---------- conversations ----------
class ConversationCreateRequest(BaseModel):
    receiver_id: str = Field(..., min_length=1)


class ConversationOut(TimestampedSchema):
    id: int
    sender_id: str
    receiver_id: str


class ConversationResponse(BaseModel):
    conversation: ConversationOut
    other_user_id: str
    other_user_profile: Optional[ProfileSummary] = None


# ---------- messages ----------
class MessageCreateRequest(BaseModel):
    body: str


class MessageOut(TimestampedSchema):
    id: int
    conversation_id: int
    author_id: str
    body: str


class ConversationListItem(BaseModel):
    conversation: ConversationOut
    other_user_id: str
    other_user_profile: Optional[ProfileSummary] = None
    last_message: Optional[MessageOut] = None


class Connection(BaseModel):
    user_id: str
    profile: Optional[ProfileSummary] = None


class ConnectionsResponse(BaseModel):
    connections: List[Connection]
