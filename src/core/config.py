"""Process configuration. Values come from the environment, with defaults suitable for local development."""

import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


DATABASE_URL: str = os.environ.get("CHESS_DATABASE_URL", "sqlite:///chess_events.db")
SQL_ECHO: bool = _env_flag("CHESS_SQL_ECHO")

# Topic every domain event is published on (and replayed from)
EVENTS_TOPIC: str = os.environ.get("CHESS_EVENTS_TOPIC", "events")

# Seconds between polls of the event log while the recovery replayer follows it
REPLAY_POLL_INTERVAL: float = float(os.environ.get("CHESS_REPLAY_POLL_INTERVAL", "0.5"))
