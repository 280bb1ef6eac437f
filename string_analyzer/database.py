import logging
from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from string_analyzer.config import settings

logger = logging.getLogger("string_analyzer.db")


def _make_engine(url: str) -> Engine:
    engine_kwargs: Dict[str, Any] = {"pool_pre_ping": True}
    parsed = make_url(url)
    if parsed.drivername.startswith("sqlite"):
        # Sync endpoints run in a threadpool
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if parsed.database in (None, "", ":memory:"):
            # Share the single in-memory database across sessions
            engine_kwargs["poolclass"] = StaticPool
    return create_engine(url, **engine_kwargs)


engine = _make_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_database_dsn(hide_password: bool = True) -> str:
    return engine.url.render_as_string(hide_password=hide_password)


def init_db() -> None:
    """Create tables that do not exist yet."""
    from string_analyzer import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized: %s", get_database_dsn())

