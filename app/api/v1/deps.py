"""Shared FastAPI dependencies: auth core wiring, bearer token extraction and policy guards."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.core.errors import Forbidden, RateLimited, Unauthenticated
from app.core.security import PasswordHasher, TokenService
from app.schemas.auth import TokenClaims
from app.services.authentication import AuthenticationService
from app.services.authorization import Decision, Policy, authorize
from app.services.throttle import LoginThrottle
from app.services.user_store import CredentialStore, SqlAlchemyUserRepository

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_login_throttle(request: Request) -> LoginThrottle:
    return request.app.state.login_throttle


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> CredentialStore:
    return SqlAlchemyUserRepository(db)


def get_auth_service(
    store: Annotated[CredentialStore, Depends(get_user_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> AuthenticationService:
    return AuthenticationService(store, hasher)


def client_key(request: Request, trust_proxy_headers: bool = False) -> str:
    """Throttle key: the socket peer, or X-Real-IP when a trusted proxy sets it."""
    if trust_proxy_headers:
        real_ip = request.headers.get("X-Real-IP", "").strip()
        if real_ip:
            return real_ip
    return request.client.host if request.client else "unknown"


def enforce_throttle(
    request: Request,
    throttle: Annotated[LoginThrottle, Depends(get_login_throttle)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> None:
    """Dependency: reject with 429 once the caller exceeds the login/register rate limit."""
    if not throttle.hit(client_key(request, settings.TRUST_PROXY_HEADERS)):
        raise RateLimited()


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenClaims:
    """Dependency: require a valid Bearer JWT and return its claims. 401 if missing or invalid."""
    if credentials is None:
        raise Unauthenticated()
    return tokens.verify(credentials.credentials)


def require_policy(policy: Policy) -> Callable[[TokenClaims], TokenClaims]:
    """Build a dependency that returns the caller's claims when they satisfy policy, else 403."""

    def dependency(
        claims: Annotated[TokenClaims, Depends(get_current_claims)],
    ) -> TokenClaims:
        if authorize(claims, policy) is Decision.DENY:
            raise Forbidden()
        return claims

    return dependency
