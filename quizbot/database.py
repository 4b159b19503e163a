"""
Database engine, session factory and schema initialization
"""
import logging
import sqlite3
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from quizbot.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on"""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def make_engine(database_url: str) -> Engine:
    connect_args = {}
    if database_url.startswith("sqlite"):
        # The bot and HTTP handlers share connections across threads
        connect_args["check_same_thread"] = False

    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


engine = make_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = None, session_factory: sessionmaker = None) -> None:
    """
    Create tables and seed the example quiz into an empty store

    Args:
        bind: Engine to create tables on (defaults to the global engine)
        session_factory: Factory used for seeding (defaults to SessionLocal)
    """
    # Import models so they register with Base.metadata
    from quizbot import models  # noqa: F401
    from quizbot.services.quiz_store import quiz_store

    bind = bind or engine
    session_factory = session_factory or SessionLocal

    Base.metadata.create_all(bind=bind)
    logger.info("Database schema ready")

    db = session_factory()
    try:
        quiz_id = quiz_store.seed_example_quiz(db)
        if quiz_id is not None:
            logger.info(f"Seeded example quiz {quiz_id}")
    finally:
        db.close()
