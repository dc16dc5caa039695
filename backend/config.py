# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Required: there is no built-in signing key
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    # Tokens cannot be revoked server-side, so keep this short
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    DATABASE_URL: str = "sqlite:///./database_ecohub.db"

    ENVIRONMENT: str = "development"
    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Session cookie mirroring the bearer token
    COOKIE_NAME: str = "ecohub_token"
    COOKIE_SECURE: Optional[bool] = None  # None -> secure only in production
    COOKIE_SAMESITE: str = "lax"

    PASSWORD_MIN_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 12

    # Login throttling: attempts per window per client IP
    LOGIN_RATE_LIMIT: int = 5
    LOGIN_RATE_WINDOW_SECONDS: int = 15 * 60

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        if self.COOKIE_SECURE is not None:
            return self.COOKIE_SECURE
        return self.is_production

settings = Settings()
