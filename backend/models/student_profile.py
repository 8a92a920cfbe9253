"""Student extension record."""

from sqlalchemy import Column, Date, ForeignKey, String
from sqlalchemy.orm import relationship

from backend.database import Base
from backend.models.user import _new_id


class StudentProfile(Base):
    """Student details, owned 1:1 by a STUDENT user."""
    __tablename__ = "student_profiles"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    national_id = Column(String)
    phone = Column(String)
    address = Column(String)
    birth_date = Column(Date)

    user = relationship("User", back_populates="student_profile")
