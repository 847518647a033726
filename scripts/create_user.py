# scripts/create_user.py
# Development stand-in for the identity provider: inserts a user and prints a bearer token.
import sys, asyncio
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import asyncio as _asyncio
from sqlalchemy import select

from app.core.config import settings
from app.core.security import create_access_token
from app.db.session import AsyncSessionLocal, engine
from app.db.models import Base
from app.modules.users.models import User, ROLE_CHOICES, UserRole


async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    name = input("Name: ").strip() or "Admin"
    email = input("Email: ").strip().lower()
    role = input(f"Role {ROLE_CHOICES} (default: {UserRole.EMPLOYEE}): ").strip() or UserRole.EMPLOYEE
    if role not in ROLE_CHOICES:
        print(f"Invalid role: {role}")
        return

    async with AsyncSessionLocal() as db:
        u = await db.scalar(select(User).where(User.email == email))
        if u:
            print(f"User already exists: {u.id} ({u.email}) role={u.role}")
        else:
            u = User(name=name, email=email, role=role)
            db.add(u)
            await db.commit()
            await db.refresh(u)
            print(f"User created: {u.id} ({u.email}) role={u.role}")

    token = create_access_token(
        {"sub": str(u.id), "role": u.role},
        expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        secret_key=settings.SECRET_KEY,
    )
    print(f"Bearer token:\n{token}")


if __name__ == "__main__":
    _asyncio.run(main())
