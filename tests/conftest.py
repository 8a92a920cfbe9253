import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
os.environ.setdefault('TOKEN_FORMAT', 'opaque')

from backend.auth.passwords import PasswordHasher  # noqa: E402
from backend.auth.tokens import TokenService  # noqa: E402
from backend.database import Base  # noqa: E402
from backend.models.parent_profile import ParentProfile  # noqa: E402
from backend.models.student_profile import StudentProfile  # noqa: E402
from backend.models.user import User  # noqa: E402
from backend.services.gateway import AuthGateway  # noqa: E402

TABLES = [User.__table__, StudentProfile.__table__, ParentProfile.__table__]


@pytest.fixture
def session_factory():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=TABLES)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine, tables=list(reversed(TABLES)))
        engine.dispose()


@pytest.fixture
def hasher() -> PasswordHasher:
    # Lowest bcrypt cost keeps the suite fast.
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(token_format='opaque', max_age_hours=24)


@pytest.fixture
def gateway(session_factory, hasher, token_service) -> AuthGateway:
    return AuthGateway(session_factory, hasher=hasher, tokens=token_service)
