"""
HTTP basic authentication for the document API.

Mirrors what an ingress basic-auth module enforces: one username and a
plain or bcrypt-hashed password. Disabled when no username is configured.
"""

import secrets
from typing import Optional

import bcrypt
import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ..config import Settings

logger = structlog.get_logger(__name__)
security = HTTPBasic(auto_error=False, realm="Authentication Required")

ANONYMOUS = "anonymous"

# bcrypt only reads the first 72 bytes; bcrypt>=5 raises ValueError beyond that
BCRYPT_MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password
        rounds: bcrypt cost factor

    Returns:
        Hashed password string, usable as BASIC_AUTH_PASSWORD_HASH
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_credentials(settings: Settings, username: str, password: str) -> bool:
    """
    Check a credential pair against the configured one.

    Args:
        settings: Service settings with BASIC_AUTH_* values
        username: Supplied username
        password: Supplied password

    Returns:
        True if both username and password match
    """
    username_ok = secrets.compare_digest(
        username.encode("utf-8"), settings.BASIC_AUTH_USERNAME.encode("utf-8")
    )

    if settings.BASIC_AUTH_PASSWORD_HASH:
        if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            logger.warning("Supplied password exceeds the bcrypt input limit")
            return False
        try:
            password_ok = bcrypt.checkpw(
                password.encode("utf-8"), settings.BASIC_AUTH_PASSWORD_HASH.encode("utf-8")
            )
        except ValueError:
            logger.error("BASIC_AUTH_PASSWORD_HASH is not a valid bcrypt hash")
            password_ok = False
    else:
        password_ok = secrets.compare_digest(
            password.encode("utf-8"), settings.BASIC_AUTH_PASSWORD.encode("utf-8")
        )

    return username_ok and password_ok


async def require_basic_auth(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(security),
) -> str:
    """
    Enforce basic authentication when it is configured.

    Returns:
        Authenticated username, or ``anonymous`` when auth is disabled

    Raises:
        HTTPException: 401 if credentials are missing or wrong
    """
    settings: Settings = request.app.state.settings
    if not settings.basic_auth_enabled:
        return ANONYMOUS

    if credentials is None or not verify_credentials(
        settings, credentials.username, credentials.password
    ):
        logger.warning(
            "Basic authentication failed",
            username=credentials.username if credentials else None,
            path=request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": 'Basic realm="Authentication Required"'},
        )

    return credentials.username
