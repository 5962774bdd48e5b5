#!/usr/bin/env python3
"""
Create Admin Script

Creates an admin account, or promotes an existing account to admin.
Registration through the API always creates regular users, so the first
admin has to come from here.

USAGE:
    python scripts/create_admin.py --username admin --email admin@example.com --password s3cretpass

    # Promote an existing account (password is left unchanged)
    python scripts/create_admin.py --username johndoe

    # Or with Docker
    docker-compose exec api python scripts/create_admin.py --username admin ...
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import or_, select

from app.config import get_settings
from app.database import SessionLocal, create_tables
from app.models import User, UserRole
from app.services.security import hash_password


def create_or_promote_admin(username: str, email: str | None, password: str | None) -> User:
    """
    Create an admin, or promote the account matching username or email.

    Raises:
        SystemExit: If a new account is needed but email or password is missing
    """
    settings = get_settings()
    create_tables()

    db = SessionLocal()

    try:
        conditions = [User.username == username]
        if email:
            conditions.append(User.email == email.lower())
        user = db.execute(select(User).where(or_(*conditions))).scalars().first()

        if user is not None:
            user.role = UserRole.ADMIN.value
            user.is_active = True
            if password:
                user.hashed_password = hash_password(password)
            db.commit()
            print(f"Promoted existing user '{user.username}' (id={user.id}) to admin.")
            return user

        if not email or not password:
            sys.exit("No such user: --email and --password are required to create one.")

        if len(password) < settings.min_password_length:
            sys.exit(f"Password must be at least {settings.min_password_length} characters.")

        user = User(
            username=username,
            email=email.lower(),
            hashed_password=hash_password(password),
            role=UserRole.ADMIN.value,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        print(f"Created admin '{user.username}' (id={user.id}).")
        return user

    except Exception as e:
        print(f"Error creating admin: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create or promote an admin account.")
    parser.add_argument("--username", required=True, help="Username of the admin")
    parser.add_argument("--email", help="Email (required when creating a new account)")
    parser.add_argument("--password", help="Password (required when creating a new account)")
    args = parser.parse_args()

    create_or_promote_admin(args.username, args.email, args.password)
