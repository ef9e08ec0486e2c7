from datetime import date
from typing import List, Optional

from app.schemas.base import BaseSchema


class ProfileSummary(BaseSchema):
    user_id: str
    full_name: str
    age: Optional[int] = None
    gender: str
    height: float
    religion: str
    caste: str
    education: str
    profession: str
    city: str
    state: str


class CandidateOut(ProfileSummary):
    date_of_birth: date
    interest_accepted: bool = False


class MatchesResponse(BaseSchema):
    matches: List[CandidateOut]


def summarize(profile) -> Optional[ProfileSummary]:
    return ProfileSummary.model_validate(profile) if profile is not None else None
