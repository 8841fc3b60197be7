"""Create a user directly in the database (bootstrap the first ADMIN).

Usage:
    python -m scripts.create_user <email> <role> [password]
Without a password the account is created password-less and the user
finishes with check-user -> validate-otp -> set-password.
All imports use app.*.
"""

import asyncio
import sys

from app.application.dtos.user import UserCreate
from app.application.services import UserService
from app.core.config import get_settings
from app.domain.exceptions import AuthGateException
from app.infrastructure.persistence import database
from app.infrastructure.persistence.repositories import UserRepository
from app.infrastructure.security import BcryptPasswordHasher


async def main() -> None:
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.create_user <email> <role> [password]",
            file=sys.stderr,
        )
        sys.exit(1)
    email, role = sys.argv[1], sys.argv[2].upper()
    password = sys.argv[3] if len(sys.argv) > 3 else None

    get_settings()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    try:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                service = UserService(UserRepository(session), BcryptPasswordHasher())
                user = await service.create_user(
                    UserCreate(email=email, role=role, password=password)
                )
    except AuthGateException as e:
        print(f"{e.error_code}: {e.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        await database.dispose_engine()

    print(f"Created user: {user.id} ({user.email}, {user.role})")
    if not user.has_password:
        print("No password set; complete the set-password flow via OTP.")


if __name__ == "__main__":
    asyncio.run(main())
