from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "roomchat"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    SECRET_KEY: str
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    DATABASE_URL: str = "sqlite+aiosqlite:///./roomchat.db"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

settings = Settings()
