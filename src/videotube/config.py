import os
from typing import List


def _split_env_list(value: str) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item and item.strip()]


class Settings:
    """Centralized application settings loaded from environment variables.

    This keeps security-sensitive values (JWT secret, media host credentials)
    and cross-cutting config (CORS, logging, rate limits) in one place.
    """

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DB_AUTO_CREATE: bool = os.getenv("DB_AUTO_CREATE", "0") in {"1", "true", "True"}

    # JWT / Auth
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    JWT_ISSUER: str | None = os.getenv("JWT_ISSUER") or None
    JWT_AUDIENCE: str | None = os.getenv("JWT_AUDIENCE") or None

    # CORS
    # Comma-separated list, e.g. "http://localhost:3000,http://localhost:5173"
    _cors_origins_env: str = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://localhost:8000",
    )
    CORS_ORIGINS: List[str] = _split_env_list(_cors_origins_env)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Rate limiting (memory:// or redis://host:port/db)
    RATE_LIMIT: str = os.getenv("RATE_LIMIT", "100/minute")
    RATE_LIMIT_STORAGE_URI: str = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

    # Media host
    CLOUDINARY_CLOUD_NAME: str = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_API_KEY: str = os.getenv("CLOUDINARY_API_KEY", "")
    CLOUDINARY_API_SECRET: str = os.getenv("CLOUDINARY_API_SECRET", "")
    MEDIA_TIMEOUT_SECONDS: float = float(os.getenv("MEDIA_TIMEOUT_SECONDS", "60"))
    MEDIA_MAX_RETRIES: int = int(os.getenv("MEDIA_MAX_RETRIES", "2"))
    MEDIA_RETRY_BACKOFF_SECONDS: float = float(os.getenv("MEDIA_RETRY_BACKOFF_SECONDS", "0.5"))

    # Incoming multipart files are staged here before upload
    UPLOAD_TEMP_DIR: str = os.getenv("UPLOAD_TEMP_DIR", "./public/temp")


settings = Settings()
