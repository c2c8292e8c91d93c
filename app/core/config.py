import os
import logging
from dotenv import load_dotenv
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings
from typing import ClassVar, List, Optional

from app.constants.constants import MAX_CURRENT_MILESTONES

# Load environment variables from .env file
load_dotenv(".env", override=True)
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Class to store all the settings of the progress tracker application."""

    # ------------------------------
    # Database
    # ------------------------------
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./progress_tracker.db", env="DATABASE_URL")
    DATABASE_ECHO: bool = Field(False, env="DATABASE_ECHO")

    # ------------------------------
    # Auth - session tokens are issued elsewhere, we only verify them
    # ------------------------------
    SECRET_KEY: str = Field(default="development-secret-key-change-in-production", env="SECRET_KEY")
    ALGORITHM: str = Field(default="HS256", env="ALGORITHM")
    SESSION_SECRET_KEY: str = Field(default="dev-session-secret", env="SESSION_SECRET_KEY")

    # ------------------------------
    # Email - Microsoft Graph
    # ------------------------------
    MICROSOFT_CLIENT_ID: str = Field(default="", env="MICROSOFT_CLIENT_ID")
    MICROSOFT_CLIENT_SECRET: str = Field(default="", env="MICROSOFT_CLIENT_SECRET")
    MICROSOFT_TENANT_ID: str = Field(default="", env="MICROSOFT_TENANT_ID")
    MAIL_SENDER: str = Field(default="noreply@softechinc.ai", env="MAIL_SENDER")

    # ------------------------------
    # Branding used in reminder emails
    # ------------------------------
    COMPANY_NAME: str = Field(default="Softech Inc", env="COMPANY_NAME")
    APP_URL: str = Field(default="https://softechinc.ai", env="APP_URL")
    FRONTEND_URL: str = Field(default="http://localhost:3000", env="FRONTEND_URL")

    # ------------------------------
    # Environment
    # ------------------------------
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # ------------------------------
    # Milestones & reminders
    # ------------------------------
    MAX_CURRENT_MILESTONES: int = Field(default=MAX_CURRENT_MILESTONES, env="MAX_CURRENT_MILESTONES")
    REMINDER_SCHEDULER_ENABLED: bool = Field(False, env="REMINDER_SCHEDULER_ENABLED")
    REMINDER_SCHEDULER_INTERVAL_SECONDS: int = Field(60, env="REMINDER_SCHEDULER_INTERVAL_SECONDS")

    # ------------------------------
    # Database models
    # ------------------------------
    DB_MODELS: ClassVar[List[str]] = [
        "app.models.project",
        "app.models.milestones",
        "app.models.weeklyprogress",
        "app.models.emailreminder",
    ]

    # ------------------------------
    # Computed Fields
    # ------------------------------
    @computed_field
    @property
    def MAIL_CONFIGURED(self) -> bool:
        """Whether Microsoft Graph credentials are present."""
        return bool(self.MICROSOFT_TENANT_ID and self.MICROSOFT_CLIENT_ID and self.MICROSOFT_CLIENT_SECRET)

    class Config:
        """Configuration for the settings class."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate the settings
settings = Settings()
