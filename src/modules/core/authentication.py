"""Auth0 bearer-token authentication for Django REST Framework.

Tokens are RS256 JWTs verified against the tenant's JWKS, which
``PyJWKClient`` fetches once and caches for five minutes.

Rules:
* Fail Closed: a token that claims to come from our tenant and does not
  verify is a 401.  Tokens from any other issuer are left to the next
  backend (SimpleJWT).
* The accepted algorithm comes from settings, never from the token header.
* Audience and issuer are always checked.
* Roles are read from the claim named by ``AUTH0_ROLES_CLAIM`` and exposed
  as ``Auth0User.roles`` for ``modules.core.permissions``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Optional, Tuple

import jwt as pyjwt
import structlog
from django.conf import settings
from jwt import PyJWKClient
from jwt.exceptions import PyJWTError
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed

logger = structlog.get_logger(__name__)

JWKS_CACHE_SECONDS = 300


@dataclass(frozen=True)
class Auth0Config:
    domain: str
    audience: str
    algorithm: str
    roles_claim: str

    @classmethod
    def from_settings(cls) -> "Auth0Config":
        return cls(
            domain=settings.AUTH0_DOMAIN,
            audience=settings.AUTH0_AUDIENCE,
            algorithm=settings.AUTH0_ALGORITHM,
            roles_claim=settings.AUTH0_ROLES_CLAIM,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.domain and self.audience)

    @property
    def issuer(self) -> str:
        return f"https://{self.domain}/"

    @property
    def jwks_url(self) -> str:
        return f"https://{self.domain}/.well-known/jwks.json"


@lru_cache(maxsize=None)
def get_jwks_client(jwks_url: str) -> PyJWKClient:
    return PyJWKClient(jwks_url, cache_jwk_set=True, lifespan=JWKS_CACHE_SECONDS)


def roles_from_claim(claim: object) -> FrozenSet[str]:
    """Accept a list of role names or a space-separated string."""
    if isinstance(claim, str):
        return frozenset(claim.split())
    if isinstance(claim, (list, tuple, set, frozenset)):
        return frozenset(str(role) for role in claim)
    return frozenset()


class Auth0User:
    """Request user backed by verified token claims; no local row exists."""

    is_authenticated = True
    is_active = True

    def __init__(self, payload: dict, roles_claim: Optional[str] = None) -> None:
        claim_name = roles_claim or settings.AUTH0_ROLES_CLAIM
        self.payload = payload
        self.sub: str = payload.get("sub", "")
        self.roles: FrozenSet[str] = roles_from_claim(payload.get(claim_name))

    def __str__(self) -> str:  # pragma: no cover
        return self.sub


class Auth0JSONWebTokenAuthentication(BaseAuthentication):
    keyword = "Bearer"

    def __init__(self, config: Optional[Auth0Config] = None) -> None:
        self.config = config or Auth0Config.from_settings()

    def authenticate(self, request) -> Optional[Tuple[Auth0User, str]]:
        header = get_authorization_header(request).decode("latin-1")
        if not header:
            return None

        token = self.parse_header(header)
        if not self.config.enabled or self.unverified_issuer(token) != self.config.issuer:
            return None

        user = Auth0User(self.verify(token), self.config.roles_claim)
        logger.info("jwt_authenticated", sub=user.sub, roles=sorted(user.roles))
        return user, token

    def authenticate_header(self, request) -> str:
        return f'{self.keyword} realm="api"'

    def parse_header(self, header: str) -> str:
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != self.keyword.lower():
            raise AuthenticationFailed("Invalid Authorization header format.")
        return parts[1]

    @staticmethod
    def unverified_issuer(token: str) -> Optional[str]:
        try:
            claims = pyjwt.decode(token, options={"verify_signature": False})
        except PyJWTError:
            return None
        return claims.get("iss")

    def verify(self, token: str) -> dict:
        try:
            signing_key = get_jwks_client(self.config.jwks_url).get_signing_key_from_jwt(token)
            return pyjwt.decode(
                token,
                signing_key.key,
                algorithms=[self.config.algorithm],
                audience=self.config.audience,
                issuer=self.config.issuer,
            )
        except PyJWTError as exc:
            logger.warning("jwt_validation_failed", error=str(exc))
            raise AuthenticationFailed("Token validation failed.") from exc
