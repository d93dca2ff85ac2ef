from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    ENV: str = "development"
    SECRET_KEY: str = "change-me-in-production"
    DATABASE_URL: str = "sqlite:///./sale_engine.db"
    SQL_ECHO: bool = False

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    LOG_LEVEL: str = "INFO"

    # Currency used for sale price rounding
    CURRENCY: str = "USD"
    CURRENCY_DECIMAL_PLACES: int = 2

    # Admin seed
    ADMIN_EMAIL: Optional[str] = "admin@example.com"

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    class Config:
        env_file = ".env"


settings = Settings()
