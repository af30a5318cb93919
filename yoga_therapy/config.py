import warnings

from pydantic_settings import BaseSettings
from pydantic import model_validator
from typing import List

_INSECURE_SECRET_KEY = "change-me-to-a-random-secret-key-at-least-32-chars"
_INSECURE_ENCRYPTION_KEY = "change-me-generate-with-python-c-from-cryptography-fernet-import-Fernet-Fernet-generate-key"


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./yoga_therapy.db"

    # JWT
    SECRET_KEY: str = _INSECURE_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 24 * 60

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost", "http://localhost:5173"]

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_RATE_LIMIT: str = "10/minute"
    DEFAULT_RATE_LIMIT: str = "60/minute"

    # Encryption
    ENCRYPTION_KEY: str = _INSECURE_ENCRYPTION_KEY

    # Catalog
    SEED_DEFAULT_DATA: bool = True
    MIN_SERIES_POSTURES: int = 6
    DEFAULT_POSTURE_SECONDS: int = 120

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _warn_insecure_defaults(self):
        insecure = []
        if self.SECRET_KEY == _INSECURE_SECRET_KEY:
            insecure.append("SECRET_KEY")
        if self.ENCRYPTION_KEY == _INSECURE_ENCRYPTION_KEY:
            insecure.append("ENCRYPTION_KEY")
        if insecure:
            warnings.warn(
                f"SECURITY WARNING: The following settings use insecure defaults "
                f"and MUST be overridden via environment variables or .env file: "
                f"{', '.join(insecure)}. "
                f"Generate a secure ENCRYPTION_KEY with: "
                f"python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\"",
                stacklevel=2,
            )
        return self


settings = Settings()
