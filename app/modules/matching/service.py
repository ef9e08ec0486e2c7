"""
Candidate filtering.

Candidates are every other profile, narrowed by the opposite-gender rule and
by whichever partner-preference fields the acting user filled in. Results
are unordered: "suggested" is simply the first N rows.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, Iterator, List, Optional

from loguru import logger
from sqlalchemy.orm import Query, Session

from app.core.match_config import CANDIDATE_BATCH_SIZE, SUGGESTED_MATCH_LIMIT
from app.models.partner_preference import PartnerPreference
from app.models.profile import Profile
from app.schemas.enums import Gender

_OPPOSITE_GENDER = {
    Gender.male.value: Gender.female.value,
    Gender.female.value: Gender.male.value,
}

_EXACT_MATCH_FIELDS = ("religion", "caste", "education", "city", "state")


def _years_ago(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return today.replace(year=today.year - years, day=28)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def build_candidate_query(
    db: Session,
    profile: Profile,
    preference: Optional[PartnerPreference] = None,
    exclude_user_ids: Iterable[str] = (),
    today: Optional[date] = None,
) -> Query:
    today = today or date.today()

    q = db.query(Profile).filter(Profile.user_id != profile.user_id)

    excluded = set(exclude_user_ids) - {profile.user_id}
    if excluded:
        q = q.filter(Profile.user_id.notin_(sorted(excluded)))

    opposite = _OPPOSITE_GENDER.get(profile.gender)
    if opposite:
        q = q.filter(Profile.gender == opposite)

    if preference is None:
        return q

    # age N means N full years: born on/before today-N, after today-(N+1)
    if not _blank(preference.min_age):
        q = q.filter(Profile.date_of_birth <= _years_ago(today, preference.min_age))
    if not _blank(preference.max_age):
        q = q.filter(Profile.date_of_birth > _years_ago(today, preference.max_age + 1))

    if not _blank(preference.min_height):
        q = q.filter(Profile.height >= preference.min_height)
    if not _blank(preference.max_height):
        q = q.filter(Profile.height <= preference.max_height)

    for field in _EXACT_MATCH_FIELDS:
        wanted = getattr(preference, field)
        if not _blank(wanted):
            q = q.filter(getattr(Profile, field) == wanted)

    return q


def candidate_query_for(
    db: Session,
    user_id: str,
    exclude_user_ids: Iterable[str] = (),
    today: Optional[date] = None,
) -> Optional[Query]:
    """None when the user has no profile yet."""
    profile = db.get(Profile, user_id)
    if profile is None:
        logger.debug(f"No profile, no candidates | user={user_id}")
        return None

    preference = db.get(PartnerPreference, user_id)
    return build_candidate_query(db, profile, preference, exclude_user_ids, today)


def iter_candidates(
    db: Session,
    user_id: str,
    exclude_user_ids: Iterable[str] = (),
    today: Optional[date] = None,
) -> Iterator[Profile]:
    q = candidate_query_for(db, user_id, exclude_user_ids, today)
    if q is None:
        return
    yield from q.yield_per(CANDIDATE_BATCH_SIZE)


def suggested_candidates(
    db: Session,
    user_id: str,
    exclude_user_ids: Iterable[str] = (),
    limit: int = SUGGESTED_MATCH_LIMIT,
    today: Optional[date] = None,
) -> List[Profile]:
    q = candidate_query_for(db, user_id, exclude_user_ids, today)
    if q is None:
        return []
    return q.limit(limit).all()
