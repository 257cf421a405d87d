from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from roomchat.core.config import settings
from roomchat.core.logs import configure_logging
from roomchat.api.router import api
from roomchat.db.session import engine
from roomchat.db.base import Base

# Import models so Base knows them
from roomchat.db.models import user  # noqa: F401

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

app.include_router(api)

@app.get("/health")
def health():
    return {"ok": True}
