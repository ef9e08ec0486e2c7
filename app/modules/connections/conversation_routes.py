from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.db import get_db
from app.models.profile import Profile
from app.schemas.connections import (
    Connection,
    ConnectionsResponse,
    ConversationCreateRequest,
    ConversationListItem,
    ConversationOut,
    ConversationResponse,
    MessageCreateRequest,
    MessageOut,
)
from app.schemas.profile import summarize
from .gate import (
    get_conversation,
    get_or_create_conversation,
    list_connections,
    list_conversations,
    list_messages,
    send_message,
)

router = APIRouter(prefix="/v1/conversations", tags=["conversations"])


@router.get("", response_model=List[ConversationListItem])
def conversation_list(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return [
        ConversationListItem(
            conversation=ConversationOut.model_validate(s.conversation),
            other_user_id=s.other_user_id,
            other_user_profile=summarize(db.get(Profile, s.other_user_id)),
            last_message=MessageOut.model_validate(s.last_message) if s.last_message else None,
        )
        for s in list_conversations(db, user_id)
    ]


@router.get("/connections", response_model=ConnectionsResponse)
def conversation_connections(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ConnectionsResponse(
        connections=[
            Connection(user_id=uid, profile=summarize(db.get(Profile, uid)))
            for uid in list_connections(db, user_id)
        ]
    )


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
def conversation_create(
    payload: ConversationCreateRequest,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    convo, created = get_or_create_conversation(db, user_id, payload.receiver_id)
    if not created:
        response.status_code = status.HTTP_200_OK

    other = convo.other_user(user_id)
    return ConversationResponse(
        conversation=ConversationOut.model_validate(convo),
        other_user_id=other,
        other_user_profile=summarize(db.get(Profile, other)),
    )


@router.get("/{conversation_id}", response_model=ConversationResponse)
def conversation_show(
    conversation_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    convo = get_conversation(db, conversation_id, user_id)
    other = convo.other_user(user_id)
    return ConversationResponse(
        conversation=ConversationOut.model_validate(convo),
        other_user_id=other,
        other_user_profile=summarize(db.get(Profile, other)),
    )


@router.get("/{conversation_id}/messages", response_model=List[MessageOut])
def message_list(
    conversation_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return list_messages(db, conversation_id, user_id)


@router.post("/{conversation_id}/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def message_send(
    conversation_id: int,
    payload: MessageCreateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return send_message(db, conversation_id, user_id, payload.body)
