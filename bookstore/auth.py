"""
Admin authentication.

Tokens are HS256 JWTs carrying ``id``, ``email``, ``role`` and ``name``.
They expire ``jwt_expire_hours`` (8 by default) after issuance. Only
users whose role is ``admin`` can log in.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from fastapi import Depends, Header
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import Settings, get_settings
from .errors import (
    ForbiddenError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    ValidationError,
)
from .models import Identity
from .storage import DocumentStore, load_users


logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognisable hash
        return False


def create_access_token(
    claims: Dict[str, Any],
    secret: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(hours=8),
) -> str:
    to_encode = dict(claims)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Identity:
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError as exc:
        raise InvalidTokenError() from exc
    try:
        return Identity.model_validate(payload)
    except ValueError as exc:
        raise InvalidTokenError() from exc


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise MissingTokenError()
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise MissingTokenError()
    return token


def authenticate(
    authorization: Optional[str], secret: str, algorithm: str = "HS256"
) -> Identity:
    """Verify an ``Authorization: Bearer <token>`` header value."""
    return decode_token(_bearer_token(authorization), secret, algorithm)


def require_role(identity: Identity, role: str = ADMIN_ROLE) -> None:
    if identity.role != role:
        raise ForbiddenError()


def login(
    store: DocumentStore, email: Optional[str], password: Optional[str], settings: Settings
) -> Tuple[Dict[str, Any], str]:
    """Check admin credentials and issue a token.

    A user whose email matches but whose role is not ``admin`` is treated
    exactly like an unknown email.
    """
    if not email or not password:
        raise ValidationError("Email and password are required", ["email", "password"])

    logger.info("Admin login attempt: %s", email)
    user = next(
        (
            u
            for u in load_users(store)
            if u.get("email") == email and u.get("role") == ADMIN_ROLE
        ),
        None,
    )
    if user is None:
        logger.info("Admin user not found: %s", email)
        raise InvalidCredentialsError("Access restricted to administrators")

    if not verify_password(password, user.get("password", "")):
        logger.info("Wrong password for: %s", email)
        raise InvalidCredentialsError("Incorrect password")

    public_user = {
        "id": user.get("id"),
        "email": user.get("email"),
        "name": user.get("name", ""),
        "role": user.get("role"),
    }
    token = create_access_token(
        public_user,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expires_delta=timedelta(hours=settings.jwt_expire_hours),
    )
    logger.info("Admin login succeeded: %s", email)
    return public_user, token


def require_admin(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> Identity:
    identity = authenticate(authorization, settings.jwt_secret, settings.jwt_algorithm)
    require_role(identity)
    return identity
