"""
Shared fixtures: in-memory database, fake Open Trivia DB and an API client
"""
import os

os.environ.setdefault("JWT_SECRET", "quizzard-test-secret-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quizzard.database import Base, get_db
from quizzard.main import app
from quizzard.services.trivia_service import TriviaService
from quizzard.utils.cache import QuestionCache

from helpers import FakeClock, FakeTriviaUpstream


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return FakeTriviaUpstream()


@pytest.fixture
def trivia(upstream, clock):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    cache = QuestionCache(ttl=1800, clock=clock)
    return TriviaService(
        client,
        cache,
        api_url="https://opentdb.test/api.php",
        token_url="https://opentdb.test/api_token.php",
        clock=clock,
        sleep=clock.sleep
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
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
def client(session_factory, trivia):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.trivia_service = trivia

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.state.trivia_service = None
