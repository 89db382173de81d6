# medstore/utils/jwt.py
from datetime import datetime, timedelta, timezone
from typing import Tuple

from jose import jwt

from medstore.core.config import settings


def _create_token(*, subject: str, expires_delta: timedelta, kind: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,  # user email
        "typ": kind,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def create_access_refresh(subject: str) -> Tuple[str, str]:
    access_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    refresh_delta = timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)

    access_token = _create_token(subject=subject, expires_delta=access_delta, kind="access")
    refresh_token = _create_token(subject=subject, expires_delta=refresh_delta, kind="refresh")
    return access_token, refresh_token
