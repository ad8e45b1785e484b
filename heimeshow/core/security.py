"""
Security utilities for token sessions
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import logging
import time

from heimeshow.config import settings
from heimeshow.core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# Bearer scheme; missing credentials are handled by the session provider
bearer_scheme = HTTPBearer(auto_error=False)


class SecurityManager:
    """
    Issues and verifies the JWTs that back HeimeShow sessions
    """

    @staticmethod
    def create_access_token(
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create a JWT access token
        """
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(
                days=settings.JWT_ACCESS_TOKEN_EXPIRE_DAYS
            )

        to_encode.update({
            "exp": expire,
            "type": "access",
            "iat": int(time.time()),
        })

        return jwt.encode(
            to_encode,
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode and verify a JWT access token
        """
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM]
            )
        except JWTError as e:
            logger.warning(f"JWT decode error: {e}")
            raise AuthenticationError("Invalid or expired token.")

        if payload.get("type") != "access":
            raise AuthenticationError("Invalid token type. Expected access")
        if not payload.get("sub"):
            raise AuthenticationError("Could not validate credentials")
        return payload


# Create global security manager
security_manager = SecurityManager()


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create access token helper function
    """
    return security_manager.create_access_token(data, expires_delta)


def extract_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[str]:
    """
    Bearer token from the Authorization header, if any
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials or None
