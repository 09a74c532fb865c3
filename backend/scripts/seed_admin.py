"""
Seed Admin Script - Creates the initial admin account
Run: python -m scripts.seed_admin

Reads ADMIN_EMAIL, ADMIN_PASSWORD and ADMIN_NAME from the environment
(or .env). Running it again is harmless; an existing account is left as is.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config.settings import settings
from app.domain.enums import UserRole
from app.domain.errors import DomainError
from app.repositories.mongo_client import create_indexes, close_connection
from app.services.auth_service import AuthService


def seed_admin() -> int:
    """Create the configured admin if missing; returns a process exit code"""
    service = AuthService()
    try:
        user, created = service.ensure_user(
            name=settings.admin_name,
            email=settings.admin_email,
            password=settings.admin_password,
            role=UserRole.ADMIN
        )
    except DomainError as e:
        print(f"[ERROR] Could not create admin: {e.message}")
        return 1

    if not created:
        print(f"Admin user already exists: {user.email}")
        if user.role != UserRole.ADMIN:
            print(f"[WARN] Existing account has role '{user.role.value}', not admin")
        return 0

    print(f"Created admin user: {user.email} ({user.user_id})")
    return 0


def main():
    print("=== Seeding admin user ===")
    print("-" * 40)

    create_indexes()
    exit_code = seed_admin()
    close_connection()

    print("-" * 40)
    print("Done!" if exit_code == 0 else "Failed.")
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
