"""FastAPI dependencies for authentication.

Dependencies:
  get_current_user  → verify the bearer JWT and return the caller's identity
"""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from seedcopy.auth.jwt import decode_token
from seedcopy.middleware.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """Verify the provider-issued bearer token and return the caller."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if not user_id:
        logger.info("Rejected bearer token %s...", credentials.credentials[:12])
        raise AuthenticationError(
            "Authentication failed. Please sign in again.",
            details="Invalid or expired token",
        )

    metadata = payload.get("user_metadata") or {}
    return CurrentUser(
        id=user_id,
        email=payload.get("email"),
        name=metadata.get("name"),
    )
