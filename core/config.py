from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    APP_NAME: str = "Kylee's Blog API"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
    )
    LOG_LEVEL: str | None = None

    # ---- DB ----
    DATABASE_URL: str = "sqlite:///./kylee_blog.db"

    # ---- Auth ----
    AUTH_SECRET: str = Field(
        default="dev-only-secret-change-me-0123456789abcdef",
        validation_alias=AliasChoices("AUTH_SECRET", "BETTER_AUTH_SECRET", "JWT_SECRET"),
    )
    SESSION_MAX_AGE_SECONDS: int = 60 * 60 * 24 * 7
    PASSWORD_RESET_TTL_SECONDS: int = 60 * 60
    ALLOW_ADMIN_SETUP: bool = False
    ADMIN_DEFAULT_PASSWORD: str | None = None

    # ---- Site ----
    SITE_URL: str = Field(
        default="",
        validation_alias=AliasChoices("SITE_URL", "NEXT_PUBLIC_SITE_URL"),
    )
    ADMIN_EMAIL: str = ""

    # ---- Web / CORS ----
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    @model_validator(mode="after")
    def _check_secret(self):
        if self.is_production and len(self.AUTH_SECRET) < 32:
            raise ValueError("AUTH_SECRET must be at least 32 characters long in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"

    @property
    def secure_cookies(self) -> bool:
        return self.is_production

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
