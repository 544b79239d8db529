#!/usr/bin/env python3
"""Create an admin user with properly hashed password."""

import asyncio

from sqlalchemy import select

from stallbook.core.security import get_password_hash
from stallbook.database import AsyncSessionLocal
from stallbook.models.user import User


async def create_admin(
    email: str = "admin@stallbook.local",
    password: str = "Admin@123",
    full_name: str = "StallBook Admin",
) -> None:
    """Create an admin user if it doesn't exist."""
    async with AsyncSessionLocal() as session:

        # Check if admin already exists
        result = await session.execute(
            select(User).where(User.email == email)
        )
        existing = result.scalar_one_or_none()

        if existing:
            existing.password_hash = get_password_hash(password)
            existing.role = "admin"
            existing.is_active = True
            existing.full_name = full_name
            await session.commit()
            print(f"Updated existing admin user: {email}")
        else:
            admin = User(
                email=email,
                password_hash=get_password_hash(password),
                role="admin",
                full_name=full_name,
                is_active=True,
            )
            session.add(admin)
            await session.commit()
            print(f"Created admin user: {email}")

        print(f"Email: {email}")
        print("Role: admin")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("--email", default="admin@stallbook.local", help="Admin email")
    parser.add_argument("--password", default="Admin@123", help="Admin password")
    parser.add_argument("--full-name", default="StallBook Admin", help="Full name")

    args = parser.parse_args()

    asyncio.run(
        create_admin(
            email=args.email,
            password=args.password,
            full_name=args.full_name,
        )
    )
