from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import jwt, JWTError

from devflow.config.settings import settings
from devflow.enums import TokenType

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        return False


def _secret_for(token_type: TokenType) -> str:
    if token_type == TokenType.REFRESH:
        return settings.REFRESH_SECRET_KEY
    return settings.SECRET_KEY


def _create_token(user, token_type: TokenType, expires_delta: timedelta) -> str:
    payload = {
        "user_id": user.id,
        "email": user.email,
        "role": user.role,
        "type": token_type.value,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, _secret_for(token_type), algorithm=settings.ALGORITHM)


def create_access_token(user) -> str:
    return _create_token(user, TokenType.ACCESS, timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(user) -> str:
    return _create_token(user, TokenType.REFRESH, timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str, token_type: TokenType = TokenType.ACCESS) -> Optional[dict]:
    """
    Verifies signature, expiry and token type.
    Returns the payload, or None when the token is not acceptable.
    """
    try:
        payload = jwt.decode(token, _secret_for(token_type), algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type.value or not payload.get("user_id"):
        return None
    return payload
