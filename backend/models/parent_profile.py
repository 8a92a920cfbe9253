"""Parent extension record."""

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from backend.database import Base
from backend.models.user import _new_id


class ParentProfile(Base):
    """Parent details, owned 1:1 by a PARENT user."""
    __tablename__ = "parent_profiles"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    phone = Column(String)
    # Linked to a student later, outside registration.
    student_id = Column(String(36), ForeignKey("student_profiles.id", ondelete="SET NULL"))

    user = relationship("User", back_populates="parent_profile")
    student = relationship("StudentProfile")
