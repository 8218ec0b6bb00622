"""Application settings and configuration.

This module defines all configuration options for the Pawprint application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Pawprint", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Database configuration
    database_url: str = Field(default="sqlite:///./pawprint.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Feed shapes
    feed_page_size: int = Field(default=5, alias="FEED_PAGE_SIZE")
    feed_comment_preview: int = Field(default=3, alias="FEED_COMMENT_PREVIEW")
    suggested_page_size: int = Field(default=20, alias="SUGGESTED_PAGE_SIZE")
    hashtag_page_size: int = Field(default=20, alias="HASHTAG_PAGE_SIZE")
    comment_page_size: int = Field(default=10, alias="COMMENT_PAGE_SIZE")

    # Media ingestion and moderation
    max_image_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_IMAGE_BYTES")
    image_upload_url: str | None = Field(default=None, alias="IMAGE_UPLOAD_URL")
    image_upload_preset: str | None = Field(default=None, alias="IMAGE_UPLOAD_PRESET")
    moderation_api_url: str = Field(
        default="https://api.moderatecontent.com/moderate/",
        alias="MODERATION_API_URL",
    )
    moderation_api_key: str | None = Field(default=None, alias="MODERATION_API_KEY")
    # Ratings above this index are rejected as explicit content.
    moderation_max_rating: int = Field(default=2, alias="MODERATION_MAX_RATING")
    external_http_timeout_seconds: float = Field(
        default=10.0,
        alias="EXTERNAL_HTTP_TIMEOUT_SECONDS",
    )

    # Realtime channel
    realtime_path: str = Field(default="socket.io", alias="REALTIME_PATH")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def realtime_cors_origins(self) -> str | list[str]:
        """Return CORS origins in the form python-socketio expects."""
        if "*" in self.cors_origins:
            return "*"
        return self.cors_origins


settings = Settings()
