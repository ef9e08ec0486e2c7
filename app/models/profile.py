from datetime import date

from sqlalchemy import Column, String, Float, Date, DateTime, func
from app.core.db import Base


class Profile(Base):
    """Member profile. Owned by the profile service; read-only here."""

    __tablename__ = "profile"

    user_id = Column(String, primary_key=True)

    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=True)

    gender = Column(String, nullable=False, index=True)  # male | female | other
    date_of_birth = Column(Date, nullable=False, index=True)
    height = Column(Float, nullable=False)  # centimetres

    religion = Column(String, nullable=False)
    caste = Column(String, nullable=False)
    education = Column(String, nullable=False)
    profession = Column(String, nullable=False)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)

    updated_at = Column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    @property
    def age(self) -> int | None:
        if not self.date_of_birth:
            return None
        today = date.today()
        dob = self.date_of_birth
        return today.year - dob.year - ((today.month, today.day) < (dob.month, dob.day))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()
