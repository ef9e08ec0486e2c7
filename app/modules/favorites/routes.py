from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.db import get_db
from app.core.errors import AlreadyExists, NotFound
from app.models.profile import Profile
from app.schemas.favorites import (
    FavoriteCreateRequest,
    FavoriteCreateResponse,
    FavoriteOut,
    FavoriteRemoveResponse,
)
from app.schemas.profile import summarize
from .models import Favorite
from .service import add_favorite, list_favorites, remove_favorite

router = APIRouter(prefix="/v1/favorites", tags=["favorites"])


def _favorite_out(db: Session, fav: Favorite) -> FavoriteOut:
    return FavoriteOut.model_validate(fav).model_copy(
        update={"favorite_user": summarize(db.get(Profile, fav.favorite_user_id))}
    )


@router.post("", response_model=FavoriteCreateResponse, status_code=status.HTTP_201_CREATED)
def favorite_create(
    payload: FavoriteCreateRequest,
    response: Response,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        fav = add_favorite(db, user_id, payload.user_id)
    except AlreadyExists as e:
        # duplicate add is a success carrying the existing row
        response.status_code = status.HTTP_200_OK
        return FavoriteCreateResponse(favorite=_favorite_out(db, e.existing), notice=e.kind)

    return FavoriteCreateResponse(favorite=_favorite_out(db, fav))


@router.get("", response_model=List[FavoriteOut])
def favorite_list(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return [_favorite_out(db, f) for f in list_favorites(db, user_id)]


@router.delete("/{favorite_user_id}", response_model=FavoriteRemoveResponse)
def favorite_remove(
    favorite_user_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    if not remove_favorite(db, user_id, favorite_user_id):
        raise NotFound("Favorite not found")
    return FavoriteRemoveResponse(message="Removed from favorites")
