from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from stacks.core.config import get_settings


def create_access_token(subject: str, expire_minutes: int = 60 * 24 * 7) -> str:
    s = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expire_minutes)
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, s.jwt_secret, algorithm=s.jwt_algorithm)


def decode_access_token(token: str) -> Optional[str]:
    s = get_settings()
    try:
        payload = jwt.decode(token, s.jwt_secret, algorithms=[s.jwt_algorithm])
        sub = payload.get("sub")
        return str(sub) if sub is not None else None
    except JWTError:
        return None
