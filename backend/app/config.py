from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "fundhub-campaigns-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "FundHub Campaigns")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    database_url: str = os.getenv("DATABASE_URL", "postgresql+asyncpg://postgres:postgres@db:5432/fundhub_dev")
    db_echo: bool = os.getenv("DB_ECHO", "0") == "1"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Roles as issued by the account layer
    participant_role: str = os.getenv("PARTICIPANT_ROLE", "student")
    admin_role: str = os.getenv("ADMIN_ROLE", "admin")

settings = Settings()
