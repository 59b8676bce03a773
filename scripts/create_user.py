"""Utility script to register a user and print a bearer token for it."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from friendbook.application.use_cases.users import register_user
from friendbook.infrastructure.database import SessionLocal, initialize_database
from friendbook.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Register a Friendbook user and print an access token for it.",
    )
    parser.add_argument("--name", default="Friendbook Admin", help="Display name")
    parser.add_argument("--email", default="admin@example.com", help="Login email")
    parser.add_argument(
        "--password",
        default=None,
        help="Password. Prompted interactively when omitted.",
    )
    parser.add_argument(
        "--profile-image-url",
        default=None,
        help="Optional avatar URL shown next to the user's notifications.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    password = args.password or getpass("Password: ")
    if not password:
        raise SystemExit("A password is required.")

    initialize_database()

    session = SessionLocal()
    try:
        user = register_user(
            session,
            name=args.name,
            email=args.email,
            password=password,
            profile_image_url=args.profile_image_url,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the user: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Token: {create_access_token(user.id)}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
