from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError

from garage_sale.core.config import settings


class TokenUser(BaseModel):
    id: int
    username: str
    role: str


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    expires_delta: timedelta | None = None,
):
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode = {
        "sub": str(user_id),
        "id": user_id,
        "username": username,
        "role": role,
        "type": "access",
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

def decode_access_token(token: str) -> TokenUser | None:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        return None

    # Ensure the token type is "access"
    if payload.get("type") != "access":
        return None

    try:
        return TokenUser(
            id=payload.get("id"),
            username=payload.get("username"),
            role=payload.get("role"),
        )
    except ValidationError:
        return None
