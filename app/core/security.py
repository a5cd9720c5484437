"""Password hashing and JWT issuing/verification for authentication."""

import logging
import secrets
import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from pydantic import SecretStr, ValidationError

from app.core.config import BCRYPT_ROUNDS_MIN, JWT_SECRET_MIN_LEN
from app.core.errors import TokenInvalid
from app.schemas.auth import Account, TokenClaims

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

# bcrypt ignores everything past 72 bytes; newer releases raise instead, so truncate first.
BCRYPT_MAX_BYTES = 72

JWT_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "username", "email", "role", "jti", "iat", "exp", "iss", "aud"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class PasswordHasher:
    """bcrypt hashing with an explicit work factor. Every hash gets a fresh salt."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS_MIN) -> None:
        if rounds < BCRYPT_ROUNDS_MIN:
            raise ValueError(f"bcrypt rounds must be at least {BCRYPT_ROUNDS_MIN}, got {rounds}")
        self.rounds = rounds
        # Built up front so the first unknown-username login costs the same as any other.
        self._dummy_hash = self.hash(secrets.token_urlsafe(16)).encode("utf-8")

    @staticmethod
    def _encode(plain_password: str) -> bytes:
        return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(plain_password), salt).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """
        Verify a plain password against a stored hash using bcrypt's own comparison.

        Returns False for an empty hash (login disabled) and for a hash bcrypt
        cannot parse; the latter is logged, never raised.
        """
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(self._encode(plain_password), hashed.encode("utf-8"))
        except (ValueError, TypeError) as e:
            logger.warning("Stored password hash is malformed: %s", type(e).__name__)
            return False

    def verify_dummy(self, plain_password: str) -> bool:
        """Spend the same bcrypt cost as a real verify against a hash nobody owns. Always False."""
        bcrypt.checkpw(self._encode(plain_password), self._dummy_hash)
        return False


class TokenService:
    """
    Issue and verify HS256 bearer tokens.

    Tokens are stateless: there is no revocation list, so a leaked token stays
    usable until it expires. Keep ttl short.
    """

    def __init__(
        self,
        secret: SecretStr | str,
        issuer: str,
        audience: str,
        ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if isinstance(secret, str):
            secret = SecretStr(secret)
        if len(secret.get_secret_value()) < JWT_SECRET_MIN_LEN:
            raise ValueError(f"Signing key must be at least {JWT_SECRET_MIN_LEN} characters")
        if ttl <= timedelta(0):
            raise ValueError("Token lifetime must be positive")
        self._secret = secret
        self.issuer = issuer
        self.audience = audience
        self.ttl = ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenService":
        return cls(
            secret=settings.JWT_SECRET,
            issuer=settings.JWT_ISSUER,
            audience=settings.JWT_AUDIENCE,
            ttl=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        )

    def issue(self, account: Account) -> str:
        """Create a signed token carrying the account's identity and role."""
        now = self._clock()
        payload: dict[str, Any] = {
            "sub": str(account.id),
            "username": account.username,
            "email": account.email,
            "role": account.role.value,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": now + self.ttl,
            "iss": self.issuer,
            "aud": self.audience,
        }
        token = jwt.encode(payload, self._secret.get_secret_value(), algorithm=JWT_ALGORITHM)
        logger.info("Token issued for user: %s", account.username)
        return token

    def verify(self, token: str) -> TokenClaims:
        """
        Validate signature, issuer, audience and expiry (no clock skew allowed).

        Raises TokenInvalid for every failure; the concrete reason is only logged.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret.get_secret_value(),
                algorithms=[JWT_ALGORITHM],
                issuer=self.issuer,
                audience=self.audience,
                leeway=0,
                options={"require": REQUIRED_CLAIMS},
            )
            return TokenClaims.model_validate(payload)
        except jwt.ExpiredSignatureError:
            logger.info("Token rejected: expired")
        except jwt.InvalidSignatureError:
            logger.warning("Token rejected: signature mismatch")
        except (jwt.InvalidIssuerError, jwt.InvalidAudienceError) as e:
            logger.warning("Token rejected: %s", e)
        except jwt.PyJWTError as e:
            logger.warning("Token rejected: malformed (%s)", type(e).__name__)
        except ValidationError as e:
            logger.warning("Token rejected: unexpected claim values (%d errors)", e.error_count())
        raise TokenInvalid()
