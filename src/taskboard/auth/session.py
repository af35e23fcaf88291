# src/taskboard/auth/session.py

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.codec import decode_session, encode_session
from ..core.models import Session, User
from ..core.ports import RecordStore, UserRepo
from ..errors import AuthenticationError
from ..storage.keys import SESSION_KEY

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class SessionState(StrEnum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class SessionManager:
    """
    Owns the single active Session and its persisted copy.

    anonymous -> authenticating -> authenticated | anonymous
    authenticated -> anonymous (logout or failed re-login)

    AUTHENTICATING never outlives a login() call, whatever it raises.
    """

    def __init__(self, store: RecordStore, users: UserRepo) -> None:
        self._store = store
        self._users = users
        self._session: Session | None = None
        self._state = SessionState.ANONYMOUS

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current(self) -> Session | None:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    def require_session(self) -> Session:
        if self._session is None:
            raise AuthenticationError("Please log in first")
        return self._session

    def restore_session(self) -> Session | None:
        """Startup hook: adopt a persisted session if one is readable. Never raises."""
        try:
            raw = self._store.get(SESSION_KEY)
            session = decode_session(raw)
        except Exception:
            logger.exception("Failed to load persisted session.")
            session = None

        self._session = session
        self._state = SessionState.AUTHENTICATED if session else SessionState.ANONYMOUS
        if session:
            logger.info("Session restored for %s (role=%s)", session.email, session.user.role)
        else:
            logger.debug("No persisted session.")
        return session

    def login(self, email: str, password: str) -> User:
        self._state = SessionState.AUTHENTICATING
        try:
            if not (email or "").strip() or not password:
                raise AuthenticationError(INVALID_CREDENTIALS)

            if not self._users.list_users():
                raise AuthenticationError("No users found. Restart the app to initialize sample data.")

            user = self._users.verify_credentials(email, password)
            if user is None:
                logger.info("Invalid credentials for email=%s", email)
                raise AuthenticationError(INVALID_CREDENTIALS)

            session = Session(user=user.without_password())
            self._store.set(SESSION_KEY, encode_session(session))
            self._session = session
            self._state = SessionState.AUTHENTICATED
            logger.info("Login successful email=%s role=%s", user.email, user.role)
            return session.user
        except Exception:
            # A failed login must not leave an older session looking valid.
            self._discard_session()
            raise
        finally:
            if self._state == SessionState.AUTHENTICATING:
                self._state = SessionState.ANONYMOUS

    def replace_user(self, user: User) -> Session:
        """Swap in an updated profile for the signed-in user and persist it."""
        current = self.require_session()
        if user.id != current.user.id:
            raise AuthenticationError("Session belongs to another user")
        session = Session(user=user.without_password())
        self._store.set(SESSION_KEY, encode_session(session))
        self._session = session
        return session

    def logout(self) -> None:
        """Best-effort: always ends anonymous, store errors are only logged."""
        who = self._session.email if self._session else None
        self._discard_session()
        logger.info("Logged out %s", who)

    def _discard_session(self) -> None:
        self._session = None
        self._state = SessionState.ANONYMOUS
        try:
            self._store.remove(SESSION_KEY)
        except Exception:
            logger.exception("Failed to clear persisted session.")
