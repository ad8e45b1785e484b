"""
Session providers

The booking state machine never reads ambient session storage: it is handed
a provider and asks it for the current session before every mutation.
"""

from dataclasses import dataclass
from typing import Optional, Protocol
import logging

from heimeshow.core.exceptions import AuthenticationError
from heimeshow.core.security import security_manager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str
    name: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Session:
    token: str
    user: SessionUser


class SessionProvider(Protocol):
    def get_session(self) -> Optional[Session]:
        ...


class StaticSessionProvider:
    """Provider for a session resolved elsewhere (or for no session at all)"""

    def __init__(self, session: Optional[Session] = None):
        self._session = session

    def get_session(self) -> Optional[Session]:
        return self._session


class TokenSessionProvider:
    """
    Resolves a session from a bearer JWT.

    Invalid or expired tokens resolve to no session; the caller decides
    whether that means a redirect or an authentication error.
    """

    def __init__(self, token: Optional[str]):
        self.token = token
        self._resolved = False
        self._session: Optional[Session] = None

    def get_session(self) -> Optional[Session]:
        if not self._resolved:
            self._session = self._resolve()
            self._resolved = True
        return self._session

    def _resolve(self) -> Optional[Session]:
        if not self.token:
            return None
        try:
            payload = security_manager.decode_token(self.token)
        except AuthenticationError as e:
            logger.info(f"Rejected session token: {e.message}")
            return None

        user = SessionUser(
            id=str(payload["sub"]),
            email=payload.get("email", ""),
            name=payload.get("name", ""),
            phone=payload.get("phone", ""),
        )
        return Session(token=self.token, user=user)
