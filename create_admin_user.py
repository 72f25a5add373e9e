"""
Script to create an admin user or promote existing user to admin
"""
import asyncio
import sys
import os

# Add backend to path
sys.path.append(os.path.join(os.path.dirname(__file__), 'backend'))

from app.core.database import SessionLocal, engine, Base
from app import models  # register every table for create_all
from app.models.user import User
from app.core.security import get_password_hash
from sqlalchemy import select


async def create_admin_user():
    """Create an admin user if it doesn't exist, or promote an existing one"""

    email = input("Enter admin email (default: admin@example.com): ").strip() or "admin@example.com"
    password = input("Enter admin password: ").strip()
    if not password:
        print("Password is required")
        sys.exit(1)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user:
            user.is_admin = True
            await db.commit()
            print(f"User {email} promoted to admin")
        else:
            admin_user = User(
                email=email,
                hashed_password=get_password_hash(password),
                is_admin=True
            )
            db.add(admin_user)
            await db.commit()
            print(f"Admin user created: {email}")

    print(f"\nYou can now login with: {email}")


if __name__ == "__main__":
    asyncio.run(create_admin_user())
