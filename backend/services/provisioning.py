"""Account provisioning and profile updates.

Registration writes the user and its role-specific extension record in one
unit of work, so a crash half-way never leaves a user without the profile it
was meant to have, or a profile pointing at a user that was never committed.
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.auth.passwords import PasswordHasher
from backend.database import SessionLocal, unit_of_work
from backend.errors import ConflictError, NotFoundError, ValidationError
from backend.models.user import Role
from backend.schemas.auth import ProfilePatch, RegistrationInput, parse_role, serialize_user
from backend.stores.credential_store import CredentialStore

logger = logging.getLogger(__name__)

STUDENT_FIELDS = ('first_name', 'last_name', 'national_id', 'phone', 'address', 'birth_date')
PARENT_FIELDS = ('phone',)


def _provided(patch: ProfilePatch, fields: tuple[str, ...]) -> dict:
    values = {field: getattr(patch, field) for field in fields}
    return {field: value for field, value in values.items() if value is not None}


class ProfileProvisioner:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        hasher: PasswordHasher | None = None,
    ):
        self.session_factory = session_factory
        self.hasher = hasher or PasswordHasher()

    def register(self, data: RegistrationInput) -> dict:
        if not (data.email and data.password and data.display_name and data.role):
            raise ValidationError()
        role = parse_role(data.role)

        with unit_of_work(self.session_factory) as session:
            store = CredentialStore(session)
            if store.email_exists(data.email):
                raise ConflictError()

            password_hash = self.hasher.hash(data.password)

            try:
                user = store.create_user(
                    email=data.email,
                    password_hash=password_hash,
                    display_name=data.display_name,
                    role=role.value,
                )
                # A student without both names gets no profile yet; completing it is left to a later step.
                if role is Role.STUDENT and data.first_name and data.last_name:
                    store.create_student_profile(
                        user,
                        first_name=data.first_name,
                        last_name=data.last_name,
                        national_id=data.national_id,
                        phone=data.phone,
                        address=data.address,
                        birth_date=data.birth_date,
                    )
                elif role is Role.PARENT:
                    store.create_parent_profile(user, phone=data.phone)
            except IntegrityError as exc:
                # Lost a race with a concurrent registration for the same email.
                raise ConflictError() from exc

            result = serialize_user(user)

        logger.info('Registered user %s with role %s', result['id'], role.value)
        return result

    def update(self, user_id: str, patch: ProfilePatch) -> dict:
        with unit_of_work(self.session_factory) as session:
            store = CredentialStore(session)
            user = store.get_by_id(user_id)
            if user is None:
                raise NotFoundError()

            user_changes = {'updated_at': datetime.now(timezone.utc)}
            if patch.display_name is not None:
                user_changes['display_name'] = patch.display_name
            store.apply_changes(user, user_changes)

            if user.student_profile is not None:
                store.apply_changes(user.student_profile, _provided(patch, STUDENT_FIELDS))
            if user.parent_profile is not None:
                store.apply_changes(user.parent_profile, _provided(patch, PARENT_FIELDS))

            result = serialize_user(user)

        logger.info('Updated profile for user %s', user_id)
        return result
