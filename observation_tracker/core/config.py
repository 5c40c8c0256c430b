from pathlib import Path
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root

ENV_FILE = os.getenv("ENV_FILE", str(BASE_DIR / ".env"))

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    APP_ENV: str = "local"
    DATABASE_URL: str = "sqlite:///./observations.db"
    CORS_ORIGINS: str = "*"  # Comma-separated list of allowed origins, or "*" for all
    LOG_LEVEL: str = "INFO"

    # Dashboard goal for the total number of observations
    OBSERVATION_GOAL: int = 5000
    DEFAULT_FRAMEWORK_ID: str = "crp-in-action"

    AUTO_CREATE_SCHEMA: bool = True
    SEED_DEFAULT_FRAMEWORKS: bool = True

    RECENT_OBSERVATIONS_LIMIT: int = 20
    QUERY_LIMIT: int = 50

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list, handling '*' for development"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

settings = Settings()
