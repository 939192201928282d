from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./storefront.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    ACCESS_JWT_SECRET: str | None = None
    REFRESH_TOKEN_SECRET: str | None = None
    ACCESS_TOKEN_EXP_MINUTES: int = 120
    REFRESH_TOKEN_EXP_DAYS: int = 7
    COOKIE_EXPIRE_DAYS: int = 7
    BCRYPT_ROUNDS: int = 12

    CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

    UPLOAD_DIR: str = "public/upload"
    MAX_UPLOAD_BYTES: int = 10_000_000
    IMAGE_MAX_WIDTH: int = 800
    IMAGE_QUALITY: int = 100

    REQUEST_TIMEOUT_SECONDS: float = 30.0
    SLUG_MAX_ATTEMPTS: int = 10_000
    LOG_LEVEL: str = "INFO"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _parse_cors_origins(cls, value):
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return (value or "INFO").upper()

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() == "production"


settings = Settings()
