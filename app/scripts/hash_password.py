"""
Print a bcrypt hash for seeding the users table by hand, and verify it round-trips:
  python -m app.scripts.hash_password PASSWORD [--rounds 12]
"""
import argparse
import sys

from app.core.config import BCRYPT_ROUNDS_MAX, BCRYPT_ROUNDS_MIN
from app.core.security import PasswordHasher


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a bcrypt password hash.")
    parser.add_argument("password")
    parser.add_argument(
        "--rounds",
        type=int,
        default=BCRYPT_ROUNDS_MIN,
        choices=range(BCRYPT_ROUNDS_MIN, BCRYPT_ROUNDS_MAX + 1),
        metavar=f"{{{BCRYPT_ROUNDS_MIN}..{BCRYPT_ROUNDS_MAX}}}",
    )
    args = parser.parse_args(argv)

    hasher = PasswordHasher(rounds=args.rounds)
    hashed = hasher.hash(args.password)
    print(hashed)
    if not hasher.verify(args.password, hashed):
        print("Verification of the generated hash failed.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
