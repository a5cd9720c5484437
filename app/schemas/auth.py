"""Domain types and request/response schemas for authentication and user endpoints."""

import re
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 50
PASSWORD_MIN_LEN = 8
# bcrypt only looks at the first 72 bytes; 128 chars keeps request bodies bounded.
PASSWORD_MAX_LEN = 128
EMAIL_MAX_LEN = 100

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"
PASSWORD_SPECIALS = "@$!%*?&"


class Role(str, Enum):
    """Account roles; the value is what goes into the token's role claim."""

    USER = "User"
    ADMIN = "Admin"


class Account(BaseModel):
    """
    A user account as seen by the auth core.

    password_hash is excluded from every serialization and from repr. It is
    empty once the account has left AuthenticationService.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    password_hash: str = Field(default="", exclude=True, repr=False)
    role: Role = Role.USER
    is_active: bool = True
    created_at: datetime | None = None

    def redacted(self) -> "Account":
        """Copy of this account with the password hash cleared."""
        return self.model_copy(update={"password_hash": ""})


class TokenClaims(BaseModel):
    """Verified claim set extracted from a bearer token."""

    sub: int
    username: str
    email: str
    role: Role
    jti: str
    iat: datetime
    exp: datetime
    iss: str
    aud: str


class LoginRequest(BaseModel):
    """Credentials for login. Never logged or echoed back."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        pattern=USERNAME_PATTERN,
        description="Username (letters, digits, underscore)",
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        repr=False,
        description="Password",
    )


class CreateUserRequest(BaseModel):
    """Self-registration payload. Always creates a User; any role field sent is ignored."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        pattern=USERNAME_PATTERN,
    )
    email: EmailStr
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        repr=False,
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        if len(v) > EMAIL_MAX_LEN:
            raise ValueError(f"Email cannot exceed {EMAIL_MAX_LEN} characters")
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not (
            re.search(r"[a-z]", v)
            and re.search(r"[A-Z]", v)
            and re.search(r"\d", v)
            and any(ch in PASSWORD_SPECIALS for ch in v)
        ):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, "
                f"one digit, and one special character ({PASSWORD_SPECIALS})"
            )
        return v


class AdminCreateUserRequest(CreateUserRequest):
    """Account creation by an admin or an operator, who may grant any role."""

    role: Role = Role.USER


class UserPublic(BaseModel):
    """User fields safe to return to clients (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role: Role
    is_active: bool = True
    created_at: datetime | None = None


class LoginResponse(BaseModel):
    """JWT access token returned after successful login."""

    message: str = "Login successful"
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserPublic


class RegisterResponse(BaseModel):
    """Response for a successful registration."""

    message: str = "User created successfully"
    user_id: int


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserPublic]


class SensitiveDataResponse(BaseModel):
    """Sanitized admin-only payload; real secrets are never returned."""

    message: str
    accessed_by: str
    access_time: datetime
    note: str


class NewAccount(BaseModel):
    """Account fields handed to the credential store on insert (the hash travels separately)."""

    username: str
    email: str
    role: Role = Role.USER
    is_active: bool = True
