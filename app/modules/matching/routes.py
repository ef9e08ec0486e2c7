from typing import Iterable, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.db import get_db
from app.models.profile import Profile
from app.modules.connections.service import accepted_partner_ids, sent_receiver_ids
from app.schemas.profile import CandidateOut, MatchesResponse
from .service import iter_candidates, suggested_candidates

router = APIRouter(prefix="/v1/matches", tags=["matches"])


def _format(profiles: Iterable[Profile], connected: set) -> List[CandidateOut]:
    return [
        CandidateOut.model_validate(p).model_copy(update={"interest_accepted": p.user_id in connected})
        for p in profiles
    ]


@router.get("", response_model=MatchesResponse)
def list_matches(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    exclude = sent_receiver_ids(db, user_id)
    connected = accepted_partner_ids(db, user_id)
    return MatchesResponse(matches=_format(iter_candidates(db, user_id, exclude), connected))


@router.get("/suggested", response_model=MatchesResponse)
def list_suggested(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    exclude = sent_receiver_ids(db, user_id)
    connected = accepted_partner_ids(db, user_id)
    return MatchesResponse(matches=_format(suggested_candidates(db, user_id, exclude), connected))
