from fastapi import APIRouter
from roomchat.api.routes import auth, rooms, websocket

api = APIRouter(prefix="/api")
api.include_router(auth.router, tags=["auth"])
api.include_router(rooms.router, tags=["rooms"])
api.include_router(websocket.router, tags=["ws"])
