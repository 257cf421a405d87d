import asyncio
from getpass import getpass

from roomchat.db.session import AsyncSessionLocal, engine
from roomchat.db.base import Base
from roomchat.db.models import user  # noqa: F401
from roomchat.services.credentials import CredentialStore, UsernameTaken

async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    username = input("Username: ").strip()
    password = getpass("Password: ").strip()
    if not username or not password:
        print("Username and password are required")
        return

    async with AsyncSessionLocal() as db:
        try:
            await CredentialStore(db).register(username, password)
        except UsernameTaken:
            print("User already exists.")
            return
        print("User created:", username)

if __name__ == "__main__":
    asyncio.run(main())
