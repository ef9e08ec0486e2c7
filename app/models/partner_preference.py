from sqlalchemy import Column, String, Integer, Float, DateTime, func
from app.core.db import Base


class PartnerPreference(Base):
    __tablename__ = "partner_preference"

    user_id = Column(String, primary_key=True)

    # every column is optional: NULL / blank means "no constraint"
    min_age = Column(Integer, nullable=True)
    max_age = Column(Integer, nullable=True)
    min_height = Column(Float, nullable=True)
    max_height = Column(Float, nullable=True)

    religion = Column(String, nullable=True)
    caste = Column(String, nullable=True)
    education = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String, nullable=True)

    updated_at = Column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )
