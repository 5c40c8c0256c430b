import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from observation_tracker.db.base import Base
from observation_tracker.db.session import get_db
from observation_tracker.main import app
from observation_tracker.store.change_feed import ChangeFeed
from observation_tracker.store.document_store import DocumentStore

# one in-memory database shared by every connection of the test run
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db_session():
    """
    Fresh schema per test. Application code commits for real; the tables
    are dropped afterwards.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def override_get_db(db_session):
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def change_feed():
    feed = ChangeFeed()
    app.state.change_feed = feed
    yield feed
    del app.state.change_feed


@pytest.fixture()
def store(db_session, change_feed):
    return DocumentStore(db_session, change_feed)
