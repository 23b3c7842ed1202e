"""Client session state: auth token, selected session and persistence ports."""

from ppz_logalyzer.session.context import SessionContext
from ppz_logalyzer.session.store import (
    StateStore,
    InMemoryStateStore,
    JsonFileStateStore,
)

__all__ = [
    "SessionContext",
    "StateStore",
    "InMemoryStateStore",
    "JsonFileStateStore",
]
