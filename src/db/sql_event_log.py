"""Implementation of the event log (EventPublisher + EventSource) using SQLAlchemy"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import REPLAY_POLL_INTERVAL
from src.core.exceptions import EventLogError
from src.db.schema import DBEvent
from src.events.log import EventRecord

logger = logging.getLogger(__name__)


class SQLEventLog:
    """
    Events stored as rows of an append-only table.
    ---
    Writes go through a single worker thread: publish() never blocks the caller, and records are committed
    in the order they were published (which also preserves per-key order).
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        poll_interval: float = REPLAY_POLL_INTERVAL,
        batch_size: int = 500,
    ) -> None:
        self.session_factory = session_factory
        self.poll_interval = poll_interval
        self.batch_size = batch_size
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="event-log-writer")

    # -- EventPublisher --
    def publish(self, topic: str, key: str, payload: str) -> Future[None]:
        return self._writer.submit(self._append, topic, key, payload)

    def _append(self, topic: str, key: str, payload: str) -> None:
        try:
            with self.session_factory() as db:
                db.add(DBEvent(topic=topic, key=key, payload=payload))
                db.commit()
        except SQLAlchemyError as exc:
            raise EventLogError(f"Could not append event for key {key!r} to {topic!r}: {exc}") from exc

    # -- EventSource --
    def subscribe(
        self,
        topic: str,
        from_earliest: bool = True,
        follow: bool = False,
        stop: threading.Event | None = None,
    ) -> Iterator[EventRecord]:
        stop = stop or threading.Event()
        last_offset = 0 if from_earliest else self.latest_offset(topic)
        while not stop.is_set():
            batch = self._read_after(topic, last_offset)
            for record in batch:
                yield record
                last_offset = record.offset
                if stop.is_set():
                    return
            if len(batch) == self.batch_size:
                continue
            if not follow:
                return
            stop.wait(self.poll_interval)

    def latest_offset(self, topic: str) -> int:
        try:
            with self.session_factory() as db:
                query = select(func.max(DBEvent.id)).where(DBEvent.topic == topic)
                return db.scalar(query) or 0
        except SQLAlchemyError as exc:
            raise EventLogError(f"Could not read offsets of {topic!r}: {exc}") from exc

    def _read_after(self, topic: str, offset: int) -> list[EventRecord]:
        query = (
            select(DBEvent)
            .where(DBEvent.topic == topic, DBEvent.id > offset)
            .order_by(DBEvent.id)
            .limit(self.batch_size)
        )
        try:
            with self.session_factory() as db:
                return [self._to_record(row) for row in db.scalars(query)]
        except SQLAlchemyError as exc:
            raise EventLogError(f"Could not read events of {topic!r} after offset {offset}: {exc}") from exc

    def flush(self, timeout: float | None = None) -> None:
        """Wait until everything published so far has been written."""
        self._writer.submit(lambda: None).result(timeout=timeout)

    def close(self) -> None:
        self._writer.shutdown(wait=True)
        logger.debug("Event log writer shut down")

    def _to_record(self, row: DBEvent) -> EventRecord:
        """Convert SQLAlchemy model to data transfer model."""
        return EventRecord(offset=row.id, topic=row.topic, key=row.key, payload=row.payload)
