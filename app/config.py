from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./users.db"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Create missing tables at startup (migrations are still the source of truth)
    AUTO_CREATE_SCHEMA: bool = True

    # Business rules
    MINIMUM_AGE: int = 18

    # Request/response logging
    LOG_BODY_LIMIT: int = 4096

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.lower() == "development"


settings = Settings()
