# backend/stockroom/core/config.py

from functools import lru_cache
from typing import Annotated, Any, List

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    APP_NAME: str = "Stockroom API"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # key-value store backing users, credentials and the active session
    DATABASE_URL: str = "sqlite:///./stockroom.db"

    # sessions
    SESSION_TTL_HOURS: int = 24
    TOKEN_BYTES: int = 32

    # passlib schemes, first one is used for new hashes
    PASSWORD_SCHEMES: List[str] = ["pbkdf2_sha256"]

    # first startup only: admin/admin123, manager/manager123, viewer/viewer123
    SEED_DEMO_USERS: bool = True

    # storage keys (same names the browser build used)
    USERS_KEY: str = "inventory_users"
    CREDENTIALS_KEY: str = "inventory_credentials"
    SESSION_KEY: str = "inventory_auth_session"

    # comma-separated in the environment, e.g. CORS_ORIGINS="https://app.example.com,http://localhost:3000"
    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["http://localhost:3000"]

    @field_validator("SESSION_TTL_HOURS", "TOKEN_BYTES")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
