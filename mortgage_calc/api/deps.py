"""FastAPI dependency injection."""

from collections.abc import Iterator

from fastapi import Depends, Header
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from mortgage_calc.config import settings
from mortgage_calc.data.sessions import SessionStore, get_redis
from mortgage_calc.data.store import MortgageStore
from mortgage_calc.models.db import Base

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, echo=settings.debug, connect_args=_connect_args)
session_factory = sessionmaker(engine, expire_on_commit=False)

_session_store = SessionStore(get_redis())


def init_db() -> None:
    Base.metadata.create_all(engine)


def get_db() -> Iterator[Session]:
    with session_factory() as session:
        yield session


def get_store(session: Session = Depends(get_db)) -> MortgageStore:
    return MortgageStore(session)


def get_session_store() -> SessionStore:
    return _session_store


def get_user_id(x_user_id: str = Header(..., min_length=1, max_length=255)) -> str:
    """Caller identity, set by the authenticating proxy in front of the API."""
    return x_user_id
