"""
verify.py
---------
Purpose:
    Authentication for the two kinds of callers this service has.

Notes:
    - The periodic reminder trigger presents a shared secret as
      `Authorization: Bearer <CRON_SECRET>`.
    - Interview data-access routes take the end user's identity-provider JWT
      (RS256, keys from the provider's JWKS) and forward it to the store.
    - The on-demand scheduling trigger is trusted by its caller and has no
      dependency here.
"""

import hmac
from dataclasses import dataclass, field

import jwt
from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from interview_notifications.config import settings
from interview_notifications.errors import ConfigurationError, UnauthorizedError
from interview_notifications.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

_security = HTTPBearer()
_jwk_client: PyJWKClient | None = None


@dataclass
class AuthContext:
    """Verified caller: token claims plus the raw token for forwarding."""

    token: str
    claims: dict = field(default_factory=dict)

    @property
    def subject(self) -> str | None:
        return self.claims.get("sub")


def verify_cron_secret(authorization: str | None) -> None:
    """
    Check the shared secret of the periodic trigger.

    Without CRON_SECRET the check is skipped outside production; in
    production an unset secret is a configuration error.

    Raises:
        UnauthorizedError: header missing or wrong
        ConfigurationError: secret unset in production
    """
    secret = settings.CRON_SECRET
    if not secret:
        if settings.is_production():
            raise ConfigurationError(["CRON_SECRET"])
        logger.warning("CRON_SECRET not set, reminder trigger is unauthenticated")
        return

    expected = f"Bearer {secret}"
    if not authorization or not hmac.compare_digest(authorization.encode(), expected.encode()):
        raise UnauthorizedError("Invalid or missing cron secret")


def cron_auth_dependency(authorization: str | None = Header(default=None)) -> None:
    try:
        verify_cron_secret(authorization)
    except UnauthorizedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def _get_jwk_client() -> PyJWKClient:
    global _jwk_client
    if _jwk_client is None:
        jwks_url = settings.jwks_url()
        if not jwks_url:
            raise ConfigurationError(["AUTH_JWKS_URL"])
        _jwk_client = PyJWKClient(jwks_url)
    return _jwk_client


def verify_jwt(token: str) -> dict:
    try:
        signing_key = _get_jwk_client().get_signing_key_from_jwt(token)
        options = {"verify_exp": True, "verify_aud": bool(settings.AUTH_AUDIENCE)}
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            audience=settings.AUTH_AUDIENCE,
            issuer=settings.AUTH_ISSUER,
            options=options,
        )
    except ConfigurationError:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def auth_dependency(credentials: HTTPAuthorizationCredentials = Depends(_security)) -> AuthContext:
    token = credentials.credentials
    return AuthContext(token=token, claims=verify_jwt(token))
