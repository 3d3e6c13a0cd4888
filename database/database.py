from functools import lru_cache

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.config_loader import get_config
from database.models import Base


def build_engine(url: str, echo: bool = False, **engine_kwargs) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections get foreign keys switched on so ON DELETE CASCADE
    behaves the same as on PostgreSQL.
    """
    if url.startswith("sqlite"):
        engine = create_engine(url, echo=echo, **engine_kwargs)

        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=20,
        **engine_kwargs
    )


@lru_cache()
def get_engine() -> Engine:
    config = get_config()
    return build_engine(config.database.url, echo=config.database.echo)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def init_db(bind: Engine = None) -> None:
    """Create all tables (development and tests; production uses migrations)."""
    Base.metadata.create_all(bind or get_engine())

