"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets (SMTP password, database credentials) come from environment variables
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: a local SQLite file works out-of-the-box
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ALLOWED_MEDIA = [
    # video/* renders in a <video> tag
    "video/mp4",
    "video/mpeg",
    "video/ogg",
    "video/webm",
    "video/x-msvideo",
    "video/mp2t",
    "video/3gpp",
    "video/3gpp2",
    # image/* renders in a <picture> tag
    "image/png",
    "image/avif",
    "image/bmp",
    "image/gif",
    "image/jpeg",
    "image/tiff",
]


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = "sqlite+aiosqlite:///socialnet.db"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Instance
    page_title: str = "My Network"
    instance_name: str = "social"
    default_user_image: str = (
        "https://secure.gravatar.com/avatar/"
        "66d35120ac4d38d9579dd53d6086213e?d=identicon&s=512"
    )
    public_base_url: str = "http://localhost:8000"

    # Posts
    allowed_media_types: list[str] = DEFAULT_ALLOWED_MEDIA
    media_probe_timeout_seconds: float = 10.0

    # Mail
    mail_transport: str = "log"
    smtp_host: str = "smtp.example.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    mail_sender: str = "noreply@example.com"
    mail_sender_name: str = "Social Noreply"

    # Client token
    token_cookie_name: str = "savedToken"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
