"""Engine, session factory and declarative base shared by the stores."""
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import get_settings

settings = get_settings()

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, connect_args=_connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db() -> Generator[Session, None, None]:
    """
    Yield a SQLAlchemy session and close it afterwards.

    Usable directly as a FastAPI dependency by whatever transport hosts
    the engine.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create the tables when ``run_db_migrations`` is enabled."""
    from . import models  # noqa: F401  registers the mappers

    if settings.run_db_migrations:
        Base.metadata.create_all(bind=engine)
