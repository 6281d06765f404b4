"""Configuration loading for the IssueDesk circulation system.

This module provides centralized configuration management:
- Load settings from environment variables and .env files
- Validate configuration using pydantic
- Provide typed access to all settings
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from issuedesk.core.models import MemberType


class Settings(BaseSettings):
    """Application configuration loaded from environment.

    Uses pydantic-settings for environment variable handling with
    .env file support via python-dotenv.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Store configuration
    store_backend: Literal["memory", "sqlite"] = Field(
        default="sqlite",
        description="Library store backend type",
    )
    store_sqlite_path: str = Field(
        default="./data/library.db",
        description="SQLite database file path",
    )

    # Loan policy
    student_loan_days: int = Field(
        default=7,
        description="Loan period in days for student members",
    )
    faculty_loan_days: int = Field(
        default=90,
        description="Loan period in days for faculty members",
    )
    default_late_fee_per_day: int = Field(
        default=5,
        description="Late fee per day stamped on newly issued items",
    )

    # Copy selection
    selection_strategy: Literal["first", "random"] = Field(
        default="random",
        description="How to choose among several available copies",
    )
    selection_seed: int | None = Field(
        default=None,
        description="Seed for the random selection strategy",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log format",
    )

    # Development
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging",
    )

    @field_validator("student_loan_days", "faculty_loan_days")
    @classmethod
    def validate_loan_days(cls, v: int) -> int:
        """Ensure loan periods are positive."""
        if v <= 0:
            raise ValueError("loan periods must be positive")
        return v

    @field_validator("default_late_fee_per_day")
    @classmethod
    def validate_late_fee(cls, v: int) -> int:
        """Ensure the late fee is non-negative."""
        if v < 0:
            raise ValueError("default_late_fee_per_day must be non-negative")
        return v

    def loan_days(self) -> dict[MemberType, int]:
        """Loan period table for LoanPolicy."""
        return {
            MemberType.STUDENT: self.student_loan_days,
            MemberType.FACULTY: self.faculty_loan_days,
        }


def load_settings(env_file: str | None = None) -> Settings:
    """Load application settings from environment.

    Args:
        env_file: Optional path to .env file. If not provided,
                 uses the default .env in the current directory.

    Returns:
        Validated Settings instance.

    Raises:
        ValidationError: If settings validation fails.
    """
    if env_file:
        return Settings(_env_file=env_file)  # type: ignore[call-arg]
    return Settings()


__all__ = ["Settings", "load_settings"]
