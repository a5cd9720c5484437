"""Pydantic request/response schemas and auth domain types."""

from app.schemas.auth import (
    Account,
    AdminCreateUserRequest,
    CreateUserRequest,
    LoginRequest,
    LoginResponse,
    NewAccount,
    RegisterResponse,
    Role,
    SensitiveDataResponse,
    TokenClaims,
    UserPublic,
    UsersListResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "Account",
    "AdminCreateUserRequest",
    "CreateUserRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "NewAccount",
    "RegisterResponse",
    "Role",
    "SensitiveDataResponse",
    "TokenClaims",
    "UserPublic",
    "UsersListResponse",
]
