"""Session token authentication."""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from src.domain.models import AuthSession, SessionUser

if TYPE_CHECKING:
    from src.domain.protocols import SessionStore

logger = logging.getLogger(__name__)


class SessionAuthenticator:
    """Resolves a session token to the signed-in user."""

    def __init__(self, session_store: "SessionStore"):
        self.session_store = session_store

    async def current(self, token: str | None) -> AuthSession | None:
        """Get the session for a token.

        Args:
            token: Bearer or cookie token (None if the request carried none)

        Returns:
            The session, or None if the token is missing, unknown or expired
        """
        if not token:
            return None

        record = await self.session_store.find_session(token)
        if record is None:
            logger.debug("Unknown session token")
            return None

        if record.expires_at is not None and _as_utc(record.expires_at) <= datetime.now(
            timezone.utc
        ):
            logger.debug(f"Expired session for user {record.user_id}")
            return None

        return AuthSession(user=SessionUser(id=record.user_id))


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
