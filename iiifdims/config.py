"""Configuration management for iiifdims."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """Application configuration."""

    # Application
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    PORT: int = int(os.getenv("PORT", "7680"))
    DEBUG: bool = _env_flag("DEBUG")

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./iiifdims.db")
    STATE_DIR: Path = Path(os.getenv("STATE_DIR", "./state"))

    # IIIF image server
    IIIF_SERVER_URL: str = os.getenv("IIIF_SERVER_URL", "http://localhost:8080/iiif/2")
    IIIF_TIMEOUT: float = float(os.getenv("IIIF_TIMEOUT", "10"))

    # Public base URL that public:// file URIs resolve to
    FILES_BASE_URL: str = os.getenv(
        "FILES_BASE_URL", "http://localhost:8000/sites/default/files"
    )

    # Media fields receiving the looked-up dimensions
    MEDIA_WIDTH_FIELD: str = os.getenv("MEDIA_WIDTH_FIELD", "width")
    MEDIA_HEIGHT_FIELD: str = os.getenv("MEDIA_HEIGHT_FIELD", "height")

    # Auth
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 1 day
    ALGORITHM: str = "HS256"
    SESSION_COOKIE_SECURE: bool = _env_flag("SESSION_COOKIE_SECURE")
    INITIAL_ADMIN_EMAIL: str | None = os.getenv("INITIAL_ADMIN_EMAIL")
    INITIAL_ADMIN_PASSWORD: str | None = os.getenv("INITIAL_ADMIN_PASSWORD")

    @classmethod
    def ensure_state_dir(cls) -> None:
        """Ensure the state directory (migration lock) exists."""
        cls.STATE_DIR.mkdir(parents=True, exist_ok=True)


config = Config()
