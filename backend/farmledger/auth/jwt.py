"""Access tokens scoped to a user and their farm, plus password hashing."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from farmledger.config import get_settings


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    # Farm the user belonged to when the token was issued; None before joining one.
    farm_id: int | None


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(user_id: int, farm_id: int | None, expires_minutes: int | None = None) -> str:
    settings = get_settings()
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "farm": farm_id,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> TokenClaims | None:
    """Claims of a valid, unexpired token; None otherwise."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.isdigit():
        return None
    farm = payload.get("farm")
    if farm is not None and (isinstance(farm, bool) or not isinstance(farm, int)):
        return None
    return TokenClaims(user_id=int(sub), farm_id=farm)
