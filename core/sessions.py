# ABOUTME: Database-backed session management for cookie authentication
# ABOUTME: Creates, validates (with sliding expiry), invalidates and purges sessions; builds cookie attributes

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from core.identifiers import generate_session_token

logger = logging.getLogger(__name__)

SESSION_LIFETIME = timedelta(days=30)
# Sessions with less than this left are extended and their cookie re-issued
SESSION_REFRESH_WINDOW = timedelta(days=15)


@dataclass
class Session:
    id: str
    user_id: str
    expires_at: datetime
    fresh: bool = False


@dataclass
class SessionCookie:
    """Cookie to send back; ``value`` is empty and ``max_age`` 0 for a blank cookie."""

    name: str
    value: str
    max_age: int
    secure: bool
    httponly: bool = True
    samesite: str = "Lax"
    path: str = "/"


class SessionManager:
    """Issues and validates opaque session tokens stored in the sessions table."""

    def __init__(self, db, cookie_name: str = "auth_session", secure_cookies: bool = False):
        self.db = db
        self.cookie_name = cookie_name
        self.secure_cookies = secure_cookies

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def create_session(self, user_id: str) -> Session:
        session = Session(
            id=generate_session_token(),
            user_id=user_id,
            expires_at=self._now() + SESSION_LIFETIME,
            fresh=True,
        )
        self.db.create_session(session.id, session.user_id, session.expires_at)
        return session

    def validate_session(self, session_id: str) -> tuple[Session | None, dict[str, Any] | None]:
        """Resolve a session id to (session, user).

        Expired sessions are deleted and resolve to (None, None). Sessions inside
        the refresh window get a new expiry and come back with ``fresh=True``.
        """
        record = self.db.get_session_with_user(session_id)
        if record is None:
            return None, None

        now = self._now()
        data = record["session"]
        session = Session(id=data["id"], user_id=data["user_id"], expires_at=data["expires_at"])

        if now >= session.expires_at:
            self.db.delete_session(session.id)
            return None, None

        if now >= session.expires_at - SESSION_REFRESH_WINDOW:
            session.expires_at = now + SESSION_LIFETIME
            session.fresh = True
            self.db.update_session_expiry(session.id, session.expires_at)

        return session, record["user"]

    def invalidate_session(self, session_id: str) -> None:
        self.db.delete_session(session_id)

    def delete_expired_sessions(self) -> int:
        removed = self.db.delete_expired_sessions(self._now())
        if removed:
            logger.info(f"Purged {removed} expired sessions")
        return removed

    def create_session_cookie(self, session: Session) -> SessionCookie:
        max_age = max(int((session.expires_at - self._now()).total_seconds()), 0)
        return SessionCookie(self.cookie_name, session.id, max_age, self.secure_cookies)

    def create_blank_session_cookie(self) -> SessionCookie:
        return SessionCookie(self.cookie_name, "", 0, self.secure_cookies)
