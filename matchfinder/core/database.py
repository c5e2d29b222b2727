# matchfinder/core/database.py
from datetime import datetime, timezone

from sqlalchemy import create_engine, event, DateTime
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from sqlalchemy.types import TypeDecorator

from matchfinder.core.config import get_settings
from matchfinder.core.geo import register_sqlite_functions


def build_engine(database_url: str, **kwargs) -> Engine:
    if database_url.startswith("sqlite"):
        # FastAPI serves requests from a thread pool
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(database_url, **kwargs)
        event.listen(engine, "connect", register_sqlite_functions)
        return engine

    return create_engine(
        database_url,
        # Recycle connections after 30 min and ping before use (managed Postgres drops idle ones)
        pool_recycle=1800,
        pool_pre_ping=True,
        **kwargs,
    )


engine = build_engine(get_settings().DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


class UTCDateTime(TypeDecorator):
    """Stores naive UTC, returns aware UTC. Keeps SQLite and Postgres comparisons identical."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def dialect_insert(db: Session, model):
    """INSERT construct with ON CONFLICT support for the session's backend."""
    if db.get_bind().dialect.name == "postgresql":
        return pg_insert(model)
    return sqlite_insert(model)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
