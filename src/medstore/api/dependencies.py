"""Request authentication for the API routes.

The bearer token is read from ``Authorization: Bearer <token>`` or, for
older clients, from the ``x-auth-token`` header.
"""

import structlog
from fastapi import Depends, Header, HTTPException
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.shared.security import InvalidTokenError, decode_access_token

logger = structlog.get_logger(__name__)


def _bearer_token(authorization, x_auth_token):
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return x_auth_token or None


async def current_user(
    authorization: str | None = Header(None),
    x_auth_token: str | None = Header(None),
) -> User:
    token = _bearer_token(authorization, x_auth_token)
    if token is None:
        raise HTTPException(status_code=401, detail="No token, authorization denied")

    try:
        user_id = decode_access_token(token)
    except InvalidTokenError as exc:
        logger.info("token_rejected", reason=str(exc))
        raise HTTPException(status_code=401, detail="Token is not valid") from None

    try:
        return current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=401, detail="User not found") from None


async def require_admin(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Access denied. Admin privileges required.")
    return user


async def optional_user(
    authorization: str | None = Header(None),
    x_auth_token: str | None = Header(None),
) -> User | None:
    """The signed-in user for routes that also serve anonymous visitors."""
    if _bearer_token(authorization, x_auth_token) is None:
        return None
    return await current_user(authorization, x_auth_token)
