from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from app.core.db import Base


class Favorite(Base):
    __tablename__ = "favorites"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    favorite_user_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "favorite_user_id", name="uq_favorites_user_favorite"),
        CheckConstraint("user_id <> favorite_user_id", name="ck_favorites_not_self"),
        {"sqlite_autoincrement": True},
    )
