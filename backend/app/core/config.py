from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./lumina.db"
    LOG_LEVEL: str = "INFO"
    # Use a secure secret key in production!
    SECRET_KEY: str = "CHANGE_THIS_LUMINA_SECRET_KEY"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    FRONTEND_URL: str = "http://localhost:5173"
    REGISTRATION_WEBHOOK_URL: str | None = None
    WEBHOOK_TIMEOUT_SECONDS: float = 10.0
    INVITE_DEFAULT_EXPIRY_DAYS: int = 3
    INVITE_ATTEMPTS_PER_MINUTE: int = 10

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

@lru_cache
def get_settings():
    return Settings()
