import asyncio
from getpass import getpass

from roomchat.db.session import AsyncSessionLocal, engine
from roomchat.db.base import Base
from roomchat.db.models import user  # noqa: F401
from roomchat.services.credentials import CredentialStore


async def main():
    # ensure tables exist
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    username = input("Username to reset: ").strip()
    new_pass = getpass("New password: ").strip()

    if not new_pass:
        print("Password cannot be empty")
        return

    async with AsyncSessionLocal() as db:
        if not await CredentialStore(db).set_password(username, new_pass):
            print("User not found:", username)
            return
        print("Password reset OK for:", username)


if __name__ == "__main__":
    asyncio.run(main())
