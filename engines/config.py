"""
Wage & Hour Compliance Engine Configuration

Environment-based settings for evaluation thresholds, scoring and penalties.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (WAGE_ prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="WAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "WageCheck Compliance Engine"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # Wage classification
    wage_warning_margin: Decimal = Field(
        default=Decimal("1.00"),
        description="Wages less than this above the binding rate are a warning",
    )

    # Overtime classification
    overtime_owed_tolerance: Decimal = Field(
        default=Decimal("0.01"),
        description="Owed amounts at or below this are treated as rounding noise",
    )
    overtime_violation_threshold: Decimal = Field(
        default=Decimal("50.00"),
        description="Owed amounts above this are a violation rather than a warning",
    )

    # Scoring
    score_penalty_weight: Decimal = Decimal("20")

    # Penalty exposure
    minimum_wage_penalty_multiplier: Decimal = Field(
        default=Decimal("2.0"),
        description="Underpayment plus equal liquidated damages",
    )
    overtime_penalty_multiplier: Decimal = Decimal("2.0")
    default_period_hours: Decimal = Field(
        default=Decimal("40"),
        description="Hours used to size wage underpayment when no time record exists",
    )

    # Upcoming rate increases
    upcoming_increase_window_days: int = 90

    # Trend data
    trend_window_size: int = Field(default=12, ge=1)

    # Rule data source
    rule_file_path: str = "data/wage_rules.json"
    rule_source_timeout_seconds: float = 10.0

    # Dashboard
    dashboard_top_findings: int = 5


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
