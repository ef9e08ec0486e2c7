from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.base import TimestampedSchema
from app.schemas.profile import ProfileSummary


class FavoriteCreateRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


class FavoriteOut(TimestampedSchema):
    id: int
    user_id: str
    favorite_user_id: str
    favorite_user: Optional[ProfileSummary] = None


class FavoriteCreateResponse(BaseModel):
    favorite: FavoriteOut
    notice: Optional[str] = None


class FavoriteRemoveResponse(BaseModel):
    message: str
