"""Persistence for users and their role-specific profiles.

Every method works inside the session it was given; the caller decides where
the transaction starts and ends.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from backend.models.parent_profile import ParentProfile
from backend.models.student_profile import StudentProfile
from backend.models.user import User

_WITH_PROFILES = (
    selectinload(User.student_profile),
    selectinload(User.parent_profile).selectinload(ParentProfile.student),
)


class CredentialStore:
    def __init__(self, session: Session):
        self.session = session

    def find_for_login(self, email: str, role: str) -> User | None:
        # Matching on both keys means a wrong role looks exactly like an unknown email.
        statement = (
            select(User)
            .where(User.email == email, User.role == role)
            .options(*_WITH_PROFILES)
        )
        return self.session.scalars(statement).first()

    def get_by_id(self, user_id: str) -> User | None:
        statement = select(User).where(User.id == user_id).options(*_WITH_PROFILES)
        return self.session.scalars(statement).first()

    def email_exists(self, email: str) -> bool:
        statement = select(User.id).where(User.email == email).limit(1)
        return self.session.scalars(statement).first() is not None

    def create_user(self, *, email: str, password_hash: str, display_name: str, role: str) -> User:
        user = User(email=email, password_hash=password_hash, display_name=display_name, role=role)
        self.session.add(user)
        self.session.flush()
        return user

    def create_student_profile(
        self,
        user: User,
        *,
        first_name: str,
        last_name: str,
        national_id: str | None = None,
        phone: str | None = None,
        address: str | None = None,
        birth_date: date | None = None,
    ) -> StudentProfile:
        profile = StudentProfile(
            user=user,
            first_name=first_name,
            last_name=last_name,
            national_id=national_id,
            phone=phone,
            address=address,
            birth_date=birth_date,
        )
        self.session.add(profile)
        self.session.flush()
        return profile

    def create_parent_profile(self, user: User, *, phone: str | None = None) -> ParentProfile:
        profile = ParentProfile(user=user, phone=phone, student_id=None)
        self.session.add(profile)
        self.session.flush()
        return profile

    def apply_changes(self, record, changes: dict) -> None:
        """Set only the given attributes; anything not in ``changes`` keeps its value."""
        for field, value in changes.items():
            setattr(record, field, value)
        self.session.flush()
