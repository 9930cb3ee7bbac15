"""Protocol event log (implemented with SQL Alchemy in src/db, can implement later for Kafka etc.)"""

import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Iterator, Protocol


@dataclass(frozen=True)
class EventRecord:
    """A serialized event as stored in the log. Offsets increase in commit order."""

    offset: int
    topic: str
    key: str
    payload: str


class EventPublisher(Protocol):
    """Write side of the event log"""

    def publish(self, topic: str, key: str, payload: str) -> Future[None]:
        """Append a payload to the topic. The returned future completes once the log has accepted it."""
        ...


class EventSource(Protocol):
    """Read side of the event log"""

    def subscribe(
        self,
        topic: str,
        from_earliest: bool = True,
        follow: bool = False,
        stop: threading.Event | None = None,
    ) -> Iterator[EventRecord]:
        """
        Yield the records of a topic in commit order.
        ---
        With follow=True, keep waiting for new records until `stop` is set.
        """
        ...
