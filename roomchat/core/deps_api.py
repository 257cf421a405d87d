from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from roomchat.db.session import get_db
from roomchat.core.security import username_from_token
from roomchat.db.models.user import User
from roomchat.services.credentials import CredentialStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

async def user_for_token(token: str, db: AsyncSession) -> User | None:
    username = username_from_token(token)
    if not username:
        return None
    user = await CredentialStore(db).get(username)
    if not user or not user.is_active:
        return None
    return user

async def get_current_user_api(token: str = Depends(oauth2_scheme), db: AsyncSession = Depends(get_db)) -> User:
    user = await user_for_token(token, db)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user
