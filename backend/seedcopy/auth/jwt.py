"""Verification of auth-provider access tokens.

The BaaS auth provider issues HS256 JWTs signed with the project's JWT
secret. Claims we rely on:
  - sub:            user ID
  - email:          account email
  - aud:            "authenticated"
  - user_metadata:  {"name": ...}
  - exp:            expiry timestamp

``create_access_token`` mints provider-compatible tokens for local
development and tests.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from seedcopy.config import settings

ALGORITHM = settings.jwt_algorithm


def create_access_token(
    user_id: str,
    email: str,
    name: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload = {
        "sub": user_id,
        "email": email,
        "aud": settings.jwt_audience,
        "role": "authenticated",
        "exp": expire,
    }
    if name:
        payload["user_metadata"] = {"name": name}
    return jwt.encode(payload, settings.baas_jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT. Returns empty dict on failure."""
    try:
        return jwt.decode(
            token,
            settings.baas_jwt_secret,
            algorithms=[ALGORITHM],
            audience=settings.jwt_audience,
        )
    except JWTError:
        return {}
