"""Auth service — access-token encoding/decoding and domain checks."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from hr_dashboard.common.exceptions import ForbiddenException, UnauthorizedException
from hr_dashboard.config import settings


def create_access_token(email: str, *, expires_in_hours: Optional[int] = None) -> str:
    """Encode an access token whose subject is the (lower-cased) email."""
    hours = settings.JWT_EXPIRY_HOURS if expires_in_hours is None else expires_in_hours
    payload = {
        "sub": email.strip().lower(),
        "type": "access",
        "exp": datetime.now(timezone.utc) + timedelta(hours=hours),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the subject email of a valid access token, else raise 401."""
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise UnauthorizedException("Token has expired.")
    except JWTError:
        raise UnauthorizedException("Invalid token.")

    if payload.get("type") != "access":
        raise UnauthorizedException("Invalid token type.")
    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedException("Token has no subject.")
    return str(subject)


def validate_domain(email: str) -> None:
    """Ensure the email belongs to the allowed domain, when one is configured."""
    if settings.ALLOWED_DOMAIN and not email.endswith(f"@{settings.ALLOWED_DOMAIN}"):
        raise ForbiddenException(
            detail=f"Only @{settings.ALLOWED_DOMAIN} accounts are permitted.",
        )
