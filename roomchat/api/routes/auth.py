import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from roomchat.db.session import get_db
from roomchat.db.models.user import User
from roomchat.core.deps_api import get_current_user_api
from roomchat.core.security import create_access_token
from roomchat.schemas.auth import Credentials, TokenOut
from roomchat.services.credentials import CredentialStore, UsernameTaken

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")

@router.post("/register", status_code=201)
async def register(payload: Credentials, db: AsyncSession = Depends(get_db)):
    try:
        await CredentialStore(db).register(payload.username, payload.password)
    except UsernameTaken:
        raise HTTPException(400, "Username already exists")
    except SQLAlchemyError:
        await db.rollback()
        log.exception("register failed for %s", payload.username)
        raise HTTPException(500, "Server Error")
    return {"message": "User registered successfully"}

@router.post("/login", response_model=TokenOut)
async def login(payload: Credentials, db: AsyncSession = Depends(get_db)):
    try:
        user = await CredentialStore(db).verify(payload.username, payload.password)
    except SQLAlchemyError:
        log.exception("login failed for %s", payload.username)
        raise HTTPException(500, "Server Error")
    if not user:
        raise HTTPException(400, "Invalid Credentials")
    return TokenOut(token=create_access_token(sub=user.username), username=user.username)

@router.get("/me")
async def me(user: User = Depends(get_current_user_api)):
    return {"username": user.username}
