"""
Database seeding script for the initial admin.

Admins cannot be created through the API (registration always assigns the
"user" role), so the first admin is inserted here. Prints a development
token for the seeded account.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.identity import create_access_token
from backend.app.db.session import AsyncSessionLocal, Base, engine
from backend.app.models.enums import UserRole
from backend.app.models.user import User

ADMIN_EMAIL = "admin@parcel-courier.local"


async def seed_admin(db: AsyncSession, email: str = ADMIN_EMAIL, display_name: str = "Admin") -> bool:
    """
    Ensure a user with this email exists and has the admin role.

    Returns:
        True if anything was written
    """
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user is None:
        db.add(User.from_document(
            {"email": email, "displayName": display_name},
            role=UserRole.ADMIN.value,
        ))
    elif user.role != UserRole.ADMIN.value:
        user.merge_fields({"role": UserRole.ADMIN.value})
    else:
        return False

    await db.commit()
    return True


async def main(email: str):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        print("🌱 Seeding admin user...")

        if await seed_admin(db, email):
            print(f"✅ {email} is now an ADMIN")
        else:
            print(f"ℹ️  {email} is already an ADMIN, skipping seeding")

    token = create_access_token({"sub": email, "email": email})
    print("\nDevelopment token (only valid against the configured signing key):")
    print(f"  Authorization: Bearer {token}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else ADMIN_EMAIL))
