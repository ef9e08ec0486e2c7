from dataclasses import dataclass
from typing import List, Set

from loguru import logger
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.db import atomic
from app.core.errors import NotAuthorized, NotFound, SelfReferenceError
from app.modules.notifications.dispatcher import create_for
from app.schemas.enums import InterestAction, InterestListType, InterestStatus, NotificationType
from .models import Interest


@dataclass
class InterestResult:
    interest: Interest
    already_exists: bool = False


_ACTION_STATUS = {
    InterestAction.accept: InterestStatus.accepted,
    InterestAction.reject: InterestStatus.rejected,
}


# ---------- LOOKUPS ----------

def _find_interest(db: Session, sender_id: str, receiver_id: str) -> Interest | None:
    return (
        db.query(Interest)
        .filter(Interest.sender_id == sender_id, Interest.receiver_id == receiver_id)
        .first()
    )


def _between(a: str, b: str):
    return or_(
        and_(Interest.sender_id == a, Interest.receiver_id == b),
        and_(Interest.sender_id == b, Interest.receiver_id == a),
    )


def is_connected(db: Session, user_a: str, user_b: str) -> bool:
    """True when an accepted interest exists between the two users, either direction."""
    return (
        db.query(Interest.id)
        .filter(_between(user_a, user_b), Interest.status == InterestStatus.accepted)
        .first()
        is not None
    )


def sent_receiver_ids(db: Session, sender_id: str) -> Set[str]:
    rows = db.query(Interest.receiver_id).filter(Interest.sender_id == sender_id).all()
    return {r.receiver_id for r in rows}


def accepted_partner_ids(db: Session, user_id: str) -> Set[str]:
    rows = (
        db.query(Interest.sender_id, Interest.receiver_id)
        .filter(
            or_(Interest.sender_id == user_id, Interest.receiver_id == user_id),
            Interest.status == InterestStatus.accepted,
        )
        .all()
    )
    return {r.receiver_id if r.sender_id == user_id else r.sender_id for r in rows}


def list_interests(db: Session, user_id: str, list_type: InterestListType = InterestListType.all) -> List[Interest]:
    q = db.query(Interest)
    if list_type == InterestListType.sent:
        q = q.filter(Interest.sender_id == user_id)
    elif list_type == InterestListType.received:
        q = q.filter(Interest.receiver_id == user_id)
    else:
        q = q.filter(or_(Interest.sender_id == user_id, Interest.receiver_id == user_id))
    return q.order_by(Interest.created_at.desc(), Interest.id.desc()).all()


# ---------- LIFECYCLE ----------

def create_interest(db: Session, sender_id: str, receiver_id: str) -> InterestResult:
    """
    Send an interest from ``sender_id`` to ``receiver_id``.

    A second call for the same ordered pair returns the stored row with
    ``already_exists=True`` instead of failing. The reverse pair is a
    separate interest.
    """
    if sender_id == receiver_id:
        raise SelfReferenceError("Cannot send an interest to yourself")

    existing = _find_interest(db, sender_id, receiver_id)
    if existing:
        logger.info(f"Interest already exists | id={existing.id} sender={sender_id} receiver={receiver_id}")
        return InterestResult(existing, already_exists=True)

    interest = Interest(
        sender_id=sender_id,
        receiver_id=receiver_id,
        status=InterestStatus.pending,
    )
    try:
        with atomic(db):
            db.add(interest)
            db.flush()
            create_for(db, NotificationType.interest_received, interest)
    except IntegrityError:
        # lost a race against a duplicate submission
        existing = _find_interest(db, sender_id, receiver_id)
        if existing is None:
            raise
        logger.info(f"Interest insert raced, returning existing | id={existing.id}")
        return InterestResult(existing, already_exists=True)

    db.refresh(interest)
    logger.info(f"Interest created | id={interest.id} sender={sender_id} receiver={receiver_id}")
    return InterestResult(interest)


def transition_interest(db: Session, interest_id: int, acting_user_id: str, action: InterestAction) -> Interest:
    interest = db.get(Interest, interest_id)
    if not interest:
        raise NotFound("Interest not found")

    if interest.receiver_id != acting_user_id:
        raise NotAuthorized("Only the receiver can respond to this interest")

    new_status = _ACTION_STATUS[action]
    if interest.status == new_status:
        return interest

    with atomic(db):
        interest.status = new_status
        db.flush()
        if new_status == InterestStatus.accepted:
            create_for(db, NotificationType.interest_accepted, interest)

    db.refresh(interest)
    logger.info(f"Interest {new_status.value} | id={interest.id} by={acting_user_id}")
    return interest


def cancel_interest(db: Session, interest_id: int, acting_user_id: str) -> None:
    interest = db.get(Interest, interest_id)
    if not interest:
        raise NotFound("Interest not found")

    if interest.sender_id != acting_user_id:
        raise NotAuthorized("Only the sender can cancel this interest")

    # hard delete in any status; conversations opened under it stay
    previous = interest.status
    with atomic(db):
        db.delete(interest)

    logger.info(f"Interest cancelled | id={interest_id} sender={acting_user_id} was={previous.value}")
