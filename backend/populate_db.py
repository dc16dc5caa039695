"""Creates the tables and seeds (or promotes) the first admin account.

Usage:
    ADMIN_EMAIL=admin@ecohub.local ADMIN_PASSWORD=... python populate_db.py
"""
import os
import sys

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from sqlalchemy.orm import Session

from database import SessionLocal, init_db
from models.impact import UserImpact
from models.users import AccountStatus, Role, User
from services.accounts import get_user_by_email, normalize_email
from utils.hashing import get_password_hash


def seed_admin(db: Session, email: str, password: str, name: str = "EcoHub Admin"):
    """Return ``(user, created)``; an existing account is promoted and reactivated."""
    user = get_user_by_email(db, email)
    if user:
        user.role = Role.ADMIN.value
        user.status = AccountStatus.ACTIVE.value
        db.commit()
        return user, False

    user = User(
        email=normalize_email(email),
        password_hash=get_password_hash(password),
        name=name,
        role=Role.ADMIN.value,
        status=AccountStatus.ACTIVE.value,
        email_verified=True,
    )
    db.add(user)
    db.flush()
    db.add(UserImpact(user_id=user.id))
    db.commit()
    db.refresh(user)
    return user, True


def main():
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        print("Set ADMIN_EMAIL and ADMIN_PASSWORD to seed the admin account.")
        return 1

    init_db()
    session = SessionLocal()
    try:
        user, created = seed_admin(session, email, password, os.getenv("ADMIN_NAME", "EcoHub Admin"))
    finally:
        session.close()

    if created:
        print(f"Admin created: {email}")
    else:
        print(f"Existing account {email} promoted to admin")
    return 0


if __name__ == "__main__":
    sys.exit(main())
