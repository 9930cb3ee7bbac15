"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from concurrent.futures import Future
from pathlib import Path
from typing import Iterator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.board import Board
from src.db.schema import Base
from src.events.log import EventRecord

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def session_factory() -> Iterator[sessionmaker[Session]]:
    """Sessions on a test database. Tables are removed at teardown to make tests independent of each other."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def file_session_factory(tmp_path: Path) -> Iterator[sessionmaker[Session]]:
    """
    Sessions on a database file, for tests that read and write from different threads at the same time.
    (The in-memory database shares a single connection between all sessions.)
    """
    file_engine = create_engine(f"sqlite:///{tmp_path / 'events.db'}")
    Base.metadata.create_all(bind=file_engine)
    try:
        yield sessionmaker(bind=file_engine)
    finally:
        file_engine.dispose()


# --- MOCK DEPENDENCIES ----
class MockEventLog:
    """Mock the event log (publisher + source) using a list of records per topic."""

    def __init__(self) -> None:
        self.records: list[EventRecord] = []
        self.fail_with: Exception | None = None

    def publish(self, topic: str, key: str, payload: str) -> Future[None]:
        future: Future[None] = Future()
        if self.fail_with is not None:
            future.set_exception(self.fail_with)
            return future
        self.records.append(EventRecord(len(self.records) + 1, topic, key, payload))
        future.set_result(None)
        return future

    def subscribe(self, topic: str, from_earliest: bool = True, follow: bool = False, stop=None) -> Iterator[EventRecord]:
        start = 0 if from_earliest else len(self.records)
        for record in list(self.records[start:]):
            if record.topic == topic:
                yield record

    def payloads(self, topic: str = "events") -> list[str]:
        return [record.payload for record in self.records if record.topic == topic]

    def clear(self) -> None:
        """Clear the log (useful in between tests)"""
        self.records.clear()


@pytest.fixture
def mock_event_log() -> Iterator[MockEventLog]:
    """Ensures to clear the log between tests"""
    event_log = MockEventLog()
    try:
        yield event_log
    finally:
        event_log.clear()


@pytest.fixture
def board() -> Board:
    return Board()
