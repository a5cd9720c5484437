"""
Create a user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user secureadmin admin@acme.org 'S3cure!Passw0rd' Admin
"""
import argparse
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import DuplicateAccount, StoreUnavailable
from app.core.security import PasswordHasher
from app.schemas.auth import AdminCreateUserRequest, Role
from app.services.authentication import AuthenticationService
from app.services.user_store import SqlAlchemyUserRepository


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user account without going through the API.")
    parser.add_argument("username", help="Username (3-50 chars: letters, digits, underscore)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8-128 chars, mixed case, digit and special)")
    parser.add_argument("role", nargs="?", default=Role.USER.value, choices=[r.value for r in Role])
    args = parser.parse_args(argv)

    try:
        request = AdminCreateUserRequest(
            username=args.username.strip(),
            email=args.email,
            password=args.password,
            role=Role(args.role),
        )
    except ValidationError as e:
        for err in e.errors():
            print(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}", file=sys.stderr)
        return 1

    settings = get_settings()
    db = SessionLocal()
    try:
        service = AuthenticationService(
            SqlAlchemyUserRepository(db),
            PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
        )
        user_id = service.register(request.username, request.email, request.password, request.role)
    except DuplicateAccount as e:
        print(e.message, file=sys.stderr)
        return 1
    except StoreUnavailable:
        print("Database is not reachable; check DATABASE_URL.", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{request.username}' (id={user_id}) with role '{request.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
