# scripts/seed_admin.py
"""Create or promote an admin account.

    python -m scripts.seed_admin admin@example.com --name "Site Admin"

Nobody can reach the admin endpoints until one admin exists, so run this once
after the first deployment.
"""
import argparse
import asyncio

from core.config import settings
from core.database import build_engine, build_session_factory, create_tables
from core.permissions import load_user
from models.user import User, UserRole, UserStatus


async def seed(email: str, name: str = None):
    engine = build_engine(settings.DATABASE_URL)
    await create_tables(engine)
    session_factory = build_session_factory(engine)

    async with session_factory() as session:
        user = await load_user(session, email)

        if user is None:
            user = User(
                email=email,
                name=name,
                role=UserRole.ADMIN.value,
                status=UserStatus.ACTIVE.value,
                login_count=0,
            )
            session.add(user)
            print(f"✅ Admin {email} created")
        else:
            user.role = UserRole.ADMIN.value
            user.status = UserStatus.ACTIVE.value
            if name:
                user.name = name
            session.add(user)
            print(f"✅ {email} promoted to admin")

        await session.commit()

    await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    args = parser.parse_args()
    asyncio.run(seed(args.email, args.name))


if __name__ == "__main__":
    main()
