from pathlib import Path
from pydantic_settings import BaseSettings
from typing import Optional

PACKAGE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    PROJECT_NAME: str = "VetCare Central"
    API_V1_STR: str = "/api/v1"

    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    # Unset means bearer tokens carry no exp claim
    ACCESS_TOKEN_EXPIRE_MINUTES: Optional[int] = None

    REDIS_URL: str = "redis://localhost:6379/0"
    SESSION_BACKEND: str = "redis"  # redis, memory
    SESSION_KEY: str = "currentUser"
    SESSION_TTL_SECONDS: Optional[int] = None

    USER_DIRECTORY: str = "mock"  # mock, sql, http
    USER_DIRECTORY_URL: Optional[str] = None
    USER_DIRECTORY_TIMEOUT: float = 5.0
    MOCK_USER_PASSWORD: str = "123456"
    MOCK_USERS_FILE: Path = PACKAGE_DIR / "data" / "mock_users.json"

    FEATURE_ACCESS_FILE: Path = PACKAGE_DIR / "core" / "feature_access.json"

    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_DB: str = "vetcare"
    DATABASE_URL: Optional[str] = None

    class Config:
        case_sensitive = True
        env_file = ".env"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}/{self.POSTGRES_DB}"

settings = Settings()
