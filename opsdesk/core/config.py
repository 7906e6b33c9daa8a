"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str = "sqlite+pysqlite:///./opsdesk.db"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Department that receives every customer-created inquiry
    INTAKE_DEPARTMENT_CODE: str = "CS"

    # List pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Overview leaderboard length
    OVERVIEW_LEADERBOARD_SIZE: int = 12

    # Seconds clients should wait before retrying an unavailable store
    UNAVAILABLE_RETRY_AFTER_SECONDS: int = 30

    # CORS (comma-separated origins)
    CORS_ORIGINS: str = "http://localhost:3000"

    @property
    def is_dev(self) -> bool:
        return self.ENV == "dev"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
