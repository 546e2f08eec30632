"""
Create a user (e.g. the first admin). Run from project root:
  python -m atlas.scripts.create_user USERNAME EMAIL PASSWORD [--role ROLE ...]
Example:
  python -m atlas.scripts.create_user admin admin@example.com your-secure-password --role admin
"""
import argparse
import sys

from atlas.core.database import SessionLocal
from atlas.core.roles import RoleName, authorities_for
from atlas.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    normalize_username,
)
from atlas.services.accounts import AccountError, register_user
from atlas.services.role_catalog import RoleCatalogError, seed_roles


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Atlas user.")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "--role",
        dest="roles",
        action="append",
        choices=[r.value for r in RoleName],
        help="Role to grant; repeat for several (default: user)",
    )
    args = parser.parse_args(argv)

    try:
        username = normalize_username(args.username)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        seed_roles(db)
        user = register_user(db, username, args.email, args.password, args.roles)
    except (AccountError, RoleCatalogError) as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(
        f"Created user '{user.username}' with roles {', '.join(authorities_for(user.role_names))}."
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
