"""Test doubles and builders shared by the test modules."""

from datetime import UTC, datetime

from app.core.config import Settings
from app.core.errors import DuplicateAccount
from app.schemas.auth import Account, NewAccount, Role, TokenClaims

TEST_SECRET = "test-signing-key-0123456789-abcdefghijklmnop"
TEST_ISSUER = "secure-users-api"
TEST_AUDIENCE = "secure-users-clients"


def make_settings(**overrides: object) -> Settings:
    """Settings built from explicit values only (no env, no .env file)."""
    values: dict[str, object] = {
        "JWT_SECRET": TEST_SECRET,
        "JWT_ISSUER": TEST_ISSUER,
        "JWT_AUDIENCE": TEST_AUDIENCE,
        "DATABASE_URL": "sqlite://",
        "LOGIN_RATE_LIMIT_ATTEMPTS": 1000,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_claims(sub: int = 42, role: Role = Role.USER, **kwargs: object) -> TokenClaims:
    """Build a minimal verified claim set for authorization tests."""
    now = datetime.now(UTC)
    defaults: dict[str, object] = {
        "username": f"user{sub}",
        "email": f"user{sub}@acme.org",
        "jti": "00000000-0000-0000-0000-000000000000",
        "iat": now,
        "exp": now,
        "iss": TEST_ISSUER,
        "aud": TEST_AUDIENCE,
    }
    defaults.update(kwargs)
    return TokenClaims(sub=sub, role=role, **defaults)


class InMemoryUserRepository:
    """CredentialStore kept in a dict, for exercising the auth core without a database."""

    def __init__(self) -> None:
        self.accounts: dict[int, Account] = {}
        self._next_id = 1

    def add(self, account: NewAccount, password_hash: str) -> Account:
        """Seed an account with a given (possibly malformed or empty) stored hash."""
        return self.accounts[self.insert(account, password_hash)]

    def find_by_username(self, username: str) -> Account | None:
        for account in self.accounts.values():
            if account.username == username:
                return account
        return None

    def find_by_id(self, user_id: int) -> Account | None:
        return self.accounts.get(user_id)

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None

    def exists_by_email(self, email: str) -> bool:
        return any(a.email == email for a in self.accounts.values())

    def insert(self, account: NewAccount, password_hash: str) -> int:
        if self.exists_by_username(account.username) or self.exists_by_email(account.email):
            raise DuplicateAccount("Username or email already exists")
        user_id = self._next_id
        self._next_id += 1
        self.accounts[user_id] = Account(
            id=user_id,
            username=account.username,
            email=account.email,
            password_hash=password_hash,
            role=account.role,
            is_active=account.is_active,
            created_at=datetime.now(UTC),
        )
        return user_id

    def list_active(self) -> list[Account]:
        return [a for a in self.accounts.values() if a.is_active]
