from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from datetime import datetime

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    PROJECT_NAME: str = "Expense Tracker API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api"

    DATABASE_URL: str = f"sqlite+aiosqlite:///{BASE_DIR}/data/finance.db"
    DB_ECHO: bool = False

    BACKEND_CORS_ORIGINS: list[str] = ["*"]

    JWT_SECRET: str = "your-secret-key"
    JWT_ALGORITHM: str = "HS256"

    # Pins the server clock (demo and test mode). None means wall-clock time.
    FROZEN_NOW: Optional[datetime] = None

    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    MAIL_FROM: str = "no-reply@expense-tracker.local"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

settings = Settings()
