from contextlib import contextmanager
from typing import Callable, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend.core import config


def _connect_args(url: str) -> dict:
    # SQLite connections are shared with FastAPI's threadpool workers.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(config.DATABASE_URL, connect_args=_connect_args(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()


@contextmanager
def unit_of_work(session_factory: Callable[[], Session] = SessionLocal) -> Iterator[Session]:
    """Stage writes on one session and commit them together or not at all."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def read_session(session_factory: Callable[[], Session] = SessionLocal) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def init_schema() -> None:
    # Import side effect registers the tables on Base.metadata.
    from backend.models import parent_profile, student_profile, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
