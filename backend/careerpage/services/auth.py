"""
Password hashing, bearer tokens and the current-user lookup.

Access tokens are HS256 JWTs whose `sub` is the user id. get_current_user()
never raises: a missing, malformed or expired token simply means "no user".
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Optional

import bcrypt
import jwt
from flask import g, request

from careerpage.core.config import settings
from careerpage.core.database import get_db
from careerpage.core.exceptions import Unauthenticated
from careerpage.models.user import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as exc:
        logger.error("Password verification error: %s", exc)
        return False


def create_access_token(user_id: uuid.UUID | str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": str(user_id), "iat": now, "exp": expire, "type": "access"}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Return the user id carried by a valid access token, else None."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError:
        return None
    if payload.get("type") != "access":
        return None
    return payload.get("sub")


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user() -> Optional[User]:
    token = _bearer_token()
    if not token:
        return None
    user_id = decode_access_token(token)
    if not user_id:
        return None
    try:
        user_uuid = uuid.UUID(user_id)
    except ValueError:
        return None
    with get_db() as db:
        return db.get(User, user_uuid)


def login_required(view):
    """Resolve the current user into flask.g.current_user or raise Unauthenticated."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        user = get_current_user()
        if user is None:
            raise Unauthenticated()
        g.current_user = user
        return view(*args, **kwargs)

    return wrapper
