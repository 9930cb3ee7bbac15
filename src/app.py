"""
Wiring of the layers: board, event log, service and recovery.

On start, the board gets rebuilt from the log before the service is handed out, so replayed and live
mutations never interleave. Following the log afterwards (multi-instance failover) is opt-in, and meant
for a standby instance: its service refuses writes until `take_over()` has caught up with the log.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from src.chess.board import Board
from src.core.config import EVENTS_TOPIC
from src.db.schema import Base
from src.db.sql_event_log import SQLEventLog
from src.services.game_service import GameService
from src.services.recovery import RecoveryReplayer

logger = logging.getLogger(__name__)


@dataclass
class GameRuntime:
    board: Board
    event_log: SQLEventLog
    service: GameService
    replayer: RecoveryReplayer

    def take_over(self) -> None:
        """Stop following the log, catch up with whatever is left in it, then accept writes."""
        self.replayer.stop()
        self.replayer.replay()
        self.service.standby = False

    def shutdown(self) -> None:
        self.replayer.stop()
        self.event_log.close()


def start_game(
    session_factory: Optional[sessionmaker[Session]] = None,
    topic: str = EVENTS_TOPIC,
    follow: bool = False,
) -> GameRuntime:
    if session_factory is None:
        from src.db.database import SessionLocal, init_db

        init_db()
        session_factory = SessionLocal
    else:
        Base.metadata.create_all(bind=session_factory.kw["bind"])

    board = Board()
    event_log = SQLEventLog(session_factory)
    replayer = RecoveryReplayer(board, event_log, topic)
    recovered = replayer.replay()
    logger.info("Board recovered from %d events (%d pieces)", recovered, len(board.snapshot().position))

    if follow:
        replayer.start()

    service = GameService(board, event_log, topic, standby=follow)
    return GameRuntime(board=board, event_log=event_log, service=service, replayer=replayer)
