"""JWT helpers for the bearer-token identity."""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from pydantic import BaseModel

from signflow.core.config import get_settings

logger = logging.getLogger(__name__)


class Token(BaseModel):
    """Access token response."""

    access_token: str
    token_type: str = "bearer"


def verify_password(password: str) -> bool:
    """Check the shared login password."""
    settings = get_settings()
    return hmac.compare_digest(password.encode("utf-8"), settings.login_password.encode("utf-8"))


def create_access_token(account: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT whose subject is the account identifier."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {"sub": account, "iat": now, "exp": expire}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a JWT, returning None when it is invalid or expired."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid token: {e}")
        return None
    if not payload.get("sub"):
        return None
    return payload
