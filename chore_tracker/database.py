import os
import logging
from typing import Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from chore_tracker.constants import DATABASE_URL

logger = logging.getLogger("chore_tracker.database")

Base = declarative_base()


def create_db_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    """Build an engine for url. SQLite gets thread sharing, anything else a pool."""
    engine_args = {}
    if url.startswith("sqlite"):
        engine_args["connect_args"] = {"check_same_thread": False}
    else:
        engine_args.update({
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,
        })
    engine_args.update(kwargs)

    try:
        return create_engine(url, echo=False, **engine_args)
    except Exception as e:
        logger.error(f"Failed to create engine: {e}")
        raise


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Default engine for the process entry point; everything else receives its engine explicitly
engine = create_db_engine()


def get_db(request: Request):
    """FastAPI dependency - yields a session from the app's own session factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None):
    """Create the SQLite data directory if needed, then create all tables."""
    from chore_tracker import models  # noqa: F401 - registers the mapped tables

    bind = bind or engine
    if bind.url.drivername.startswith("sqlite"):
        database = bind.url.database
        if database and database != ":memory:":
            directory = os.path.dirname(database)
            if directory:
                os.makedirs(directory, exist_ok=True)
    Base.metadata.create_all(bind=bind)
