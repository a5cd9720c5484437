"""User endpoints: login, registration, profile and admin listing with RBAC."""

import logging
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.v1.deps import (
    enforce_throttle,
    get_auth_service,
    get_current_claims,
    get_token_service,
    get_user_store,
    require_policy,
)
from app.core.errors import Forbidden, NotFound
from app.core.security import TokenService
from app.schemas.auth import (
    AdminCreateUserRequest,
    CreateUserRequest,
    LoginRequest,
    LoginResponse,
    RegisterResponse,
    Role,
    SensitiveDataResponse,
    TokenClaims,
    UserPublic,
    UsersListResponse,
)
from app.services.authentication import AuthenticationService
from app.services.authorization import Decision, Policy, authorize
from app.services.user_store import CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=LoginResponse, dependencies=[Depends(enforce_throttle)])
def login(
    body: LoginRequest,
    auth: Annotated[AuthenticationService, Depends(get_auth_service)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    account = auth.authenticate(body.username, body.password)
    token = tokens.issue(account)
    return LoginResponse(
        access_token=token,
        user=UserPublic.model_validate(account),
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(enforce_throttle)],
)
def register(
    body: CreateUserRequest,
    auth: Annotated[AuthenticationService, Depends(get_auth_service)],
) -> RegisterResponse:
    """Create a User account. 409 when the username or email is already registered."""
    user_id = auth.register(body.username, body.email, body.password, Role.USER)
    return RegisterResponse(user_id=user_id)


@router.post("", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: AdminCreateUserRequest,
    admin: Annotated[TokenClaims, Depends(require_policy(Policy.ADMIN_ONLY))],
    auth: Annotated[AuthenticationService, Depends(get_auth_service)],
) -> RegisterResponse:
    """Create an account with any role (admin only)."""
    user_id = auth.register(body.username, body.email, body.password, body.role)
    logger.info("Admin %s created user %s with role %s", admin.username, body.username, body.role.value)
    return RegisterResponse(user_id=user_id)


@router.get("", response_model=UsersListResponse)
def list_users(
    admin: Annotated[TokenClaims, Depends(require_policy(Policy.ADMIN_ONLY))],
    store: Annotated[CredentialStore, Depends(get_user_store)],
) -> UsersListResponse:
    """List all active users (admin only)."""
    users = store.list_active()
    logger.info("Admin %s accessed all users list", admin.username)
    return UsersListResponse(users=[UserPublic.model_validate(u) for u in users])


@router.get("/profile", response_model=UserPublic)
def get_profile(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    store: Annotated[CredentialStore, Depends(get_user_store)],
) -> UserPublic:
    """Current caller's own record."""
    account = store.find_by_id(claims.sub)
    if account is None or not account.is_active:
        raise NotFound()
    return UserPublic.model_validate(account)


@router.get("/admin/sensitive-data", response_model=SensitiveDataResponse)
def get_sensitive_data(
    admin: Annotated[TokenClaims, Depends(require_policy(Policy.ADMIN_ONLY))],
) -> SensitiveDataResponse:
    """Admin-only endpoint; every access is logged."""
    logger.warning("Sensitive data accessed by admin: %s", admin.username)
    return SensitiveDataResponse(
        message="This endpoint contains sensitive administrative data",
        accessed_by=admin.username,
        access_time=datetime.now(UTC),
        note="Actual sensitive data would be properly secured and audited",
    )


@router.get("/{user_id}", response_model=UserPublic)
def get_user(
    user_id: int,
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    store: Annotated[CredentialStore, Depends(get_user_store)],
) -> UserPublic:
    """A user's record. Users may only read their own; admins may read any."""
    if authorize(claims, Policy.USER_OR_ADMIN, resource_owner_id=user_id) is Decision.DENY:
        raise Forbidden()
    account = store.find_by_id(user_id)
    if account is None or not account.is_active:
        raise NotFound()
    return UserPublic.model_validate(account)
