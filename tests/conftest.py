"""
Shared fixtures: isolated in-memory database per test
"""
import os

# Must be set before quizbot.config is imported
os.environ["TELEGRAM_BOT_TOKEN"] = "123456789:AAEtestTokenForTheQuizBotTestSuite0001"
os.environ["ADMIN_IDS"] = "42, 43"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["WEB_APP_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quizbot import models  # noqa: F401
from quizbot.database import Base, get_db


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    """HTTP client bound to the test database (bot startup is not triggered)"""
    from quizbot.main import app
    from quizbot.utils.rate_limiter import rate_limiter

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    rate_limiter.requests.clear()

    yield TestClient(app)

    app.dependency_overrides.clear()
