"""Password hashing and access tokens.

Passwords are hashed with bcrypt; access tokens are HS256 JWTs whose subject
is the user id.
"""

from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from medstore import settings

BCRYPT_ROUNDS = 10
JWT_ALGORITHM = "HS256"


class InvalidTokenError(Exception):
    """The bearer token is missing, malformed, tampered with, or expired."""


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def create_access_token(user_id: str, expires_in: timedelta | None = None) -> str:
    if expires_in is None:
        expires_in = timedelta(days=settings.jwt_expiry_days())
    now = datetime.now(UTC)
    payload = {"sub": str(user_id), "iat": now, "exp": now + expires_in}
    return jwt.encode(payload, settings.jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by ``token``."""
    try:
        payload = jwt.decode(token, settings.jwt_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("Token has expired") from exc
    except jwt.PyJWTError as exc:
        raise InvalidTokenError("Token is not valid") from exc

    user_id = payload.get("sub")
    if not user_id:
        raise InvalidTokenError("Token is not valid")
    return user_id
