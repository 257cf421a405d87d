import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from roomchat.core.security import hash_password, verify_password
from roomchat.db.models.user import User

log = logging.getLogger(__name__)

class UsernameTaken(Exception):
    def __init__(self, username: str):
        super().__init__(f"Username already exists: {username}")
        self.username = username

class CredentialStore:
    """Registers and verifies users. Only password hashes are stored."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, username: str) -> User | None:
        q = await self.db.execute(select(User).where(User.username == username))
        return q.scalar_one_or_none()

    async def register(self, username: str, password: str) -> User:
        if await self.get(username):
            raise UsernameTaken(username)

        # hash before touching the session so a failure commits nothing
        user = User(username=username, password_hash=hash_password(password), is_active=True)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent register of the same name
            await self.db.rollback()
            raise UsernameTaken(username)
        log.info("registered user %s", username)
        return user

    async def verify(self, username: str, password: str) -> User | None:
        """The user for a correct username/password pair, else None.

        Unknown users, wrong passwords and inactive accounts are
        indistinguishable to the caller.
        """
        user = await self.get(username)
        if not user or not user.is_active or not verify_password(password, user.password_hash):
            return None
        return user

    async def set_password(self, username: str, password: str) -> bool:
        user = await self.get(username)
        if not user:
            return False
        user.password_hash = hash_password(password)
        await self.db.commit()
        return True
