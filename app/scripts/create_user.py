"""
Create an account (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import sys

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as SchemaValidationError

from app.core.database import session_scope
from app.core.errors import ConflictError, StorageError
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    check_password_bytes,
    hash_password,
)
from app.services.account_directory import AccountDirectory, NewAccount

_email_adapter = TypeAdapter(EmailStr)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Tollgate account (admins cannot sign up).")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} bytes)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    try:
        email = _email_adapter.validate_python(args.email.strip())
    except SchemaValidationError:
        print("Invalid email address.", file=sys.stderr)
        return 1
    try:
        check_password_bytes(args.password)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    if len(args.password) < PASSWORD_MIN_LEN:
        print(f"Password must be at least {PASSWORD_MIN_LEN} characters.", file=sys.stderr)
        return 1

    with session_scope() as db:
        directory = AccountDirectory(db)
        try:
            if directory.find_by_email_or_username(email, username) is not None:
                print(f"User '{username}' or email '{email}' already exists.", file=sys.stderr)
                return 1
            account = directory.insert(
                NewAccount(
                    username=username,
                    email=email,
                    password_hash=hash_password(args.password),
                    role=args.role,
                )
            )
        except ConflictError:
            print(f"User '{username}' or email '{email}' already exists.", file=sys.stderr)
            return 1
        except StorageError as e:
            print(f"Database error: {e.detail}", file=sys.stderr)
            return 1
    print(f"Created user '{account.username}' (id={account.id}) with role '{account.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
