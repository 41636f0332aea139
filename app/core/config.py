from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://streakboard:streakboard@db:5432/streakboard"
    APP_ENV: str = "development"
    SECRET_KEY: str = "changeme-secret-key"

    # Root level for the streakboard.* loggers.
    LOG_LEVEL: str = "INFO"
    SQL_ECHO: bool = False

    # LC_COLLATE for leaderboard name ordering, e.g. "en_US.UTF-8".
    # Empty keeps the process default ("C", code-point order).
    COLLATION_LOCALE: str = ""

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://goals.example.com,https://app.example.com"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
