from typing import List

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.db import atomic
from app.core.errors import AlreadyExists, SelfReferenceError
from app.modules.notifications.dispatcher import create_for
from app.schemas.enums import NotificationType
from .models import Favorite


def _find_favorite(db: Session, user_id: str, target_id: str) -> Favorite | None:
    return (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id, Favorite.favorite_user_id == target_id)
        .first()
    )


def add_favorite(db: Session, user_id: str, target_id: str) -> Favorite:
    if user_id == target_id:
        raise SelfReferenceError("Cannot favorite yourself")

    existing = _find_favorite(db, user_id, target_id)
    if existing:
        raise AlreadyExists("Already in favorites", existing=existing)

    fav = Favorite(user_id=user_id, favorite_user_id=target_id)
    try:
        with atomic(db):
            db.add(fav)
            db.flush()
            create_for(db, NotificationType.favorited, fav)
    except IntegrityError:
        existing = _find_favorite(db, user_id, target_id)
        if existing is None:
            raise
        raise AlreadyExists("Already in favorites", existing=existing)

    db.refresh(fav)
    logger.info(f"Favorite added | id={fav.id} user={user_id} target={target_id}")
    return fav


def remove_favorite(db: Session, user_id: str, target_id: str) -> bool:
    fav = _find_favorite(db, user_id, target_id)
    if not fav:
        return False

    with atomic(db):
        db.delete(fav)

    logger.info(f"Favorite removed | user={user_id} target={target_id}")
    return True


def list_favorites(db: Session, user_id: str) -> List[Favorite]:
    return (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        .all()
    )
