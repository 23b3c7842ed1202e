"""Explicit auth and selected-session context.

Holds the session token, the signed-in user and the analysis session
selected in the dashboard. Every mutation is written through the injected
StateStore so a restarted client can restore it.
"""

from typing import Optional

from ppz_logalyzer.core import get_logger
from ppz_logalyzer.core.errors import AuthenticationRequiredError
from ppz_logalyzer.session.store import InMemoryStateStore, StateStore

logger = get_logger(__name__)

AUTH_KEY = "auth-storage"
SELECTED_SESSION_KEY = "selected-session"


class SessionContext:
    """Auth token and selected-session identity for one client."""

    def __init__(self, store: Optional[StateStore] = None):
        self._store = store or InMemoryStateStore()
        self.token: Optional[str] = None
        self.user_id: Optional[str] = None
        self.username: Optional[str] = None
        self.selected_session_id: Optional[str] = None

    @classmethod
    def restore(cls, store: StateStore) -> "SessionContext":
        """Rebuild a context from previously persisted state."""
        context = cls(store)
        auth = store.load(AUTH_KEY) or {}
        context.token = auth.get("token")
        context.user_id = auth.get("user_id")
        context.username = auth.get("username")
        selected = store.load(SELECTED_SESSION_KEY) or {}
        context.selected_session_id = selected.get("session_id")
        logger.info(
            "session_restored",
            authenticated=context.is_authenticated,
            selected_session_id=context.selected_session_id,
        )
        return context

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def login(self, token: str, user_id: str, username: str) -> None:
        self.token = token
        self.user_id = user_id
        self.username = username
        self._store.save(
            AUTH_KEY,
            {"token": token, "user_id": user_id, "username": username},
        )
        logger.info("user_logged_in", user_id=user_id, username=username)

    def logout(self) -> None:
        """Drop the token, the user and the selected session."""
        user_id = self.user_id
        self.token = None
        self.user_id = None
        self.username = None
        self._store.delete(AUTH_KEY)
        self.clear_session()
        logger.info("user_logged_out", user_id=user_id)

    def select_session(self, session_id: str) -> None:
        self.selected_session_id = session_id
        self._store.save(SELECTED_SESSION_KEY, {"session_id": session_id})

    def clear_session(self) -> None:
        self.selected_session_id = None
        self._store.delete(SELECTED_SESSION_KEY)

    def authorization_header(self) -> dict[str, str]:
        """Bearer header for backend calls.

        Raises:
            AuthenticationRequiredError: If no token is present
        """
        if not self.token:
            raise AuthenticationRequiredError()
        return {"Authorization": f"Bearer {self.token}"}
