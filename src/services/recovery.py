"""
Rebuild the board from the event log.

The log is trusted: events are applied without checking any rule (see Board.replay_apply).
Only failures to read or decode the log stop the replay, and they never affect requests already served.
"""

import logging
import threading
from typing import Optional

from src.chess.board import Board
from src.core.config import EVENTS_TOPIC
from src.core.exceptions import EventLogError, ReplayError
from src.events.log import EventSource
from src.events.serde import decode_event

logger = logging.getLogger(__name__)


class RecoveryReplayer:
    def __init__(self, board: Board, source: EventSource, topic: str = EVENTS_TOPIC) -> None:
        self.board = board
        self.source = source
        self.topic = topic
        self.applied = 0
        self.last_offset: Optional[int] = None
        self.error: Optional[ReplayError] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def replay(self, follow: bool = False) -> int:
        """
        Apply every event of the topic, starting from the earliest offset.
        ---
        Returns the number of events applied during this call. With follow=True this only returns after stop().
        """
        logger.info("Replaying events of topic %r (follow=%s)", self.topic, follow)
        applied = 0
        try:
            records = self.source.subscribe(
                self.topic,
                from_earliest=True,
                follow=follow,
                stop=self._stop if follow else None,
            )
            for record in records:
                if self.last_offset is not None and record.offset <= self.last_offset:
                    # already applied by an earlier call
                    continue
                logger.debug("Received event %s: %s", record.offset, record.payload)
                event = decode_event(record.payload)
                self.board.replay_apply(event)
                self.last_offset = record.offset
                applied += 1
        except EventLogError as exc:
            raise ReplayError(
                f"Replay of {self.topic!r} stopped after offset {self.last_offset}: {exc}"
            ) from exc
        finally:
            self.applied += applied

        logger.info("Replayed %d events of topic %r", applied, self.topic)
        return applied

    # -- Background task --
    def start(self) -> threading.Thread:
        """Keep following the log in a daemon thread (e.g. to take over from another instance)."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("Recovery replayer is already running")
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="recovery-replayer", daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        try:
            self.replay(follow=True)
        except ReplayError as exc:
            self.error = exc
            logger.error("Recovery replay failed", exc_info=True)
