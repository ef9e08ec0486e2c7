from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.db import get_db
from app.schemas.connections import InterestCreateRequest, InterestCreateResponse, InterestOut
from app.schemas.enums import InterestAction, InterestListType
from .service import (
    cancel_interest,
    create_interest,
    list_interests,
    transition_interest,
)

router = APIRouter(prefix="/v1/interests", tags=["interests"])

ALREADY_EXISTS_NOTICE = "already_exists"


@router.post("", response_model=InterestCreateResponse, status_code=status.HTTP_201_CREATED)
def interest_create(
    payload: InterestCreateRequest,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    result = create_interest(db, user_id, payload.receiver_id)
    if result.already_exists:
        response.status_code = status.HTTP_200_OK
        return InterestCreateResponse(
            interest=InterestOut.model_validate(result.interest),
            notice=ALREADY_EXISTS_NOTICE,
        )
    return InterestCreateResponse(interest=InterestOut.model_validate(result.interest))


@router.get("", response_model=List[InterestOut])
def interest_list(
    type: InterestListType = Query(default=InterestListType.all),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return list_interests(db, user_id, type)


@router.patch("/{interest_id}/accept", response_model=InterestOut)
def interest_accept(
    interest_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return transition_interest(db, interest_id, user_id, InterestAction.accept)


@router.patch("/{interest_id}/reject", response_model=InterestOut)
def interest_reject(
    interest_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return transition_interest(db, interest_id, user_id, InterestAction.reject)


@router.delete("/{interest_id}")
def interest_cancel(
    interest_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    cancel_interest(db, interest_id, user_id)
    return {"message": "Interest cancelled"}
