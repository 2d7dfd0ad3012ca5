"""
Preview links for unpublished careers pages.

A token is an HS256 JWT over (company id, user id, issued-at). It is valid only
for the company it was issued for and only within PREVIEW_TOKEN_TTL_MINUTES of
issue. There is no revocation list.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional

import jwt

from careerpage.core.config import settings


class PreviewToken(NamedTuple):
    token: str
    expires_at: datetime

    @property
    def expires_at_millis(self) -> int:
        return int(self.expires_at.timestamp() * 1000)


def _ttl() -> timedelta:
    return timedelta(minutes=settings.PREVIEW_TOKEN_TTL_MINUTES)


def issue_preview_token(
    company_id: uuid.UUID | str, user_id: uuid.UUID | str, now: Optional[datetime] = None
) -> PreviewToken:
    # `iat` is carried in whole seconds; expiry is derived from that same value.
    issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
    expires_at = issued_at + _ttl()
    payload = {
        "cid": str(company_id),
        "sub": str(user_id),
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return PreviewToken(token=token, expires_at=expires_at)


def is_valid_preview_token(
    token: Optional[str], company_id: uuid.UUID | str, now: Optional[datetime] = None
) -> bool:
    if not token:
        return False
    try:
        # Expiry is checked below against `now` so callers can pin the clock.
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_exp": False, "verify_iat": False},
        )
    except jwt.PyJWTError:
        return False

    if payload.get("cid") != str(company_id):
        return False
    issued_at = payload.get("iat")
    if not isinstance(issued_at, (int, float)):
        return False

    current = now or datetime.now(timezone.utc)
    age = current - datetime.fromtimestamp(issued_at, tz=timezone.utc)
    return age <= _ttl()
