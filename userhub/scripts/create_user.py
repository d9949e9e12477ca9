"""
Create a user directly (e.g. the first admin), skipping email confirmation. Run from project root:
  python -m userhub.scripts.create_user EMAIL PASSWORD [role]
Example:
  python -m userhub.scripts.create_user admin@example.com s3cure-pass admin
"""
import argparse
import sys

from pydantic import ValidationError

from userhub.core.database import SessionLocal
from userhub.core.errors import Conflict
from userhub.core.security import PASSWORD_ERROR_MESSAGE, hash_password
from userhub.models.user import UserRole
from userhub.repositories.users import SqlUserStore
from userhub.schemas.auth import SignUpRequest


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a UserHub user (no confirmation email).")
    parser.add_argument("email", help="Email address of the new account")
    parser.add_argument("password", help="Password (6-32 chars, at least one letter and one digit)")
    parser.add_argument(
        "role", nargs="?", default=UserRole.user.value, choices=[r.value for r in UserRole]
    )
    args = parser.parse_args()

    try:
        body = SignUpRequest.model_validate(
            {"email": args.email.strip(), "password": args.password}
        )
    except ValidationError as e:
        fields = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        if "password" in fields:
            print(PASSWORD_ERROR_MESSAGE, file=sys.stderr)
        if "email" in fields:
            print("Invalid email address.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        store = SqlUserStore(db)
        try:
            user = store.create(
                email=body.email,
                password_hash=hash_password(body.password),
                role=UserRole(args.role),
            )
        except Conflict as e:
            print(e.message, file=sys.stderr)
            return 1
        print(f"Created user '{user.email}' with role '{user.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
