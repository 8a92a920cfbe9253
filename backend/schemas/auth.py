from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from backend.errors import ValidationError
from backend.models.user import Role


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# --- Inputs ---

class LoginInput(_CamelModel):
    email: str | None = None
    password: str | None = None
    role: str | None = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str | None) -> str | None:
        return value.strip().lower() if value else value

    @field_validator('role')
    @classmethod
    def normalize_role(cls, value: str | None) -> str | None:
        return value.strip().upper() if value else value


class RegistrationInput(LoginInput):
    display_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices('displayName', 'name', 'display_name'),
    )
    first_name: str | None = None
    last_name: str | None = None
    national_id: str | None = None
    phone: str | None = None
    address: str | None = None
    birth_date: date | None = None

    @field_validator('birth_date', mode='before')
    @classmethod
    def empty_birth_date(cls, value):
        return _blank_to_none(value)


class ProfilePatch(_CamelModel):
    display_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices('displayName', 'name', 'display_name'),
    )
    first_name: str | None = None
    last_name: str | None = None
    national_id: str | None = None
    phone: str | None = None
    address: str | None = None
    birth_date: date | None = None

    @field_validator('*', mode='before')
    @classmethod
    def ignore_blank(cls, value):
        # Empty values mean "leave unchanged".
        return _blank_to_none(value)


# --- Outputs ---

class LinkedStudentResponse(_CamelModel):
    id: str
    first_name: str
    last_name: str


class StudentProfileResponse(_CamelModel):
    id: str
    first_name: str
    last_name: str
    national_id: str | None = None
    phone: str | None = None
    address: str | None = None
    birth_date: date | None = None


class ParentProfileResponse(_CamelModel):
    id: str
    phone: str | None = None
    student_id: str | None = None
    student: LinkedStudentResponse | None = None


class UserResponse(_CamelModel):
    """Public view of a user; the password hash has no field here and is never emitted."""
    id: str
    email: str
    display_name: str
    role: str
    created_at: datetime
    updated_at: datetime
    student_profile: StudentProfileResponse | None = None
    parent_profile: ParentProfileResponse | None = None


def serialize_user(user) -> dict:
    return UserResponse.model_validate(user).model_dump(by_alias=True, mode='json')


def parse_input(model: type[BaseModel], payload) -> BaseModel:
    """Build an input model, turning pydantic failures into a 400-class ValidationError."""
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = '.'.join(str(part) for part in first.get('loc', ())) or 'input'
        raise ValidationError(f'Invalid value for {field}') from exc


def parse_role(value: str) -> Role:
    try:
        return Role(value)
    except ValueError as exc:
        raise ValidationError('Unknown role') from exc
