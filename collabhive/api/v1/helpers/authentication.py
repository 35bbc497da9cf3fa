"""
Bearer-token authentication.

Tokens are minted by the external auth provider (HS256, shared secret);
this module only verifies them and hands the ``sub`` claim, the opaque
profile id, to the services.
"""

from typing import Any

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from collabhive.config import settings
from collabhive.api.v1.helpers.responses import unauthorized_response
import logging

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticatedUser:
    """Container for the identity resolved from a bearer token."""

    def __init__(self, user_id: str, claims: dict[str, Any] | None = None):
        self.user_id = user_id
        self.claims = claims or {}
        self.email = self.claims.get("email")


def validate_jwt_token(jwt_token: str) -> AuthenticatedUser:
    try:
        payload = jwt.decode(
            jwt_token, settings.secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        raise unauthorized_response("Invalid JWT")

    user_id = payload.get("sub")
    if not user_id:
        raise unauthorized_response("No user id found in token")

    return AuthenticatedUser(user_id=str(user_id), claims=payload)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthenticatedUser:
    if credentials is None or not credentials.credentials:
        raise unauthorized_response("No authentication method found")
    return validate_jwt_token(credentials.credentials)


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthenticatedUser | None:
    """Like get_current_user, but anonymous and invalid tokens yield None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return validate_jwt_token(credentials.credentials)
    except HTTPException:
        logger.info("Ignoring invalid bearer token on public endpoint")
        return None
