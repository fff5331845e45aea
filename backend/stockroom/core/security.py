# backend/stockroom/core/security.py

import secrets
from datetime import datetime, timedelta
from typing import Optional

from passlib.context import CryptContext

from stockroom.core.config import get_settings

settings = get_settings()

# salted, slow hash; never a reversible encoding
pwd_context = CryptContext(schemes=settings.PASSWORD_SCHEMES, deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password or "")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False

    # unknown / legacy hash formats never match
    if pwd_context.identify(hashed_password) is None:
        return False

    return pwd_context.verify(plain_password or "", hashed_password)


def generate_token(nbytes: Optional[int] = None) -> str:
    return secrets.token_urlsafe(nbytes or settings.TOKEN_BYTES)


def session_expiry(now: datetime, hours: Optional[int] = None) -> datetime:
    return now + timedelta(hours=hours or settings.SESSION_TTL_HOURS)
