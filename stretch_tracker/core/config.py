from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./stretch_tracker.db"
    APP_ENV: str = "development"

    # Persistence backend: "sql" (SQLAlchemy), "json" (flat file in DATA_DIR)
    # or "memory" (process-local, lost on restart).
    STORE_BACKEND: Literal["sql", "json", "memory"] = "sql"
    DATA_DIR: str = "./data"

    # Create tables on startup instead of running `alembic upgrade head`.
    AUTO_CREATE_TABLES: bool = False

    # IANA zone used for both Action.date and "today".
    TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()
