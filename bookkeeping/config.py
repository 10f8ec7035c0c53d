"""
Configuration Module

Loads dashboard settings from config/bookkeeping.yaml and the environment.
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "bookkeeping.yaml"

DEFAULT_ROLES = {
    "admin": ["*"],
    "user": ["record_entries", "view_reports", "export_reports"],
}


def _default_database_url() -> str:
    return os.getenv(
        "DATABASE_URL",
        f"postgresql+psycopg://{os.getenv('POSTGRES_USER', 'bookkeeping')}:"
        f"{os.getenv('POSTGRES_PASSWORD', 'password')}@"
        f"{os.getenv('POSTGRES_HOST', 'localhost')}:"
        f"{os.getenv('POSTGRES_PORT', '5432')}/"
        f"{os.getenv('POSTGRES_DB', 'bookkeeping')}"
    )


@dataclass
class Settings:
    """Runtime settings for the dashboard."""

    database_url: str = field(default_factory=_default_database_url)
    service_role_key: str | None = None
    environment: str = "development"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"

    business_name: str = "Esanga Stationery System"
    currency: str = "TZS"
    timezone: str = "UTC"
    daily_lookback_days: int | None = 7
    summary_lookback_days: int | None = None
    recent_costs_limit: int = 10
    session_ttl_minutes: int = 720
    csv_delimiter: str = ","
    roles: dict[str, list[str]] = field(default_factory=lambda: dict(DEFAULT_ROLES))


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML, then overlay environment variables.

    Args:
        config_path: Path to the YAML file (defaults to BOOKKEEPING_CONFIG
            or config/bookkeeping.yaml)

    Returns:
        Settings instance
    """
    if config_path is None:
        config_path = os.getenv("BOOKKEEPING_CONFIG", DEFAULT_CONFIG_PATH)
    config_path = Path(config_path)

    config: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Config file {config_path} not found, using defaults")

    business = config.get("business") or {}
    reports = config.get("reports") or {}
    export = config.get("export") or {}
    auth = config.get("auth") or {}

    settings = Settings(
        business_name=business.get("name", Settings.business_name),
        currency=business.get("currency", Settings.currency),
        timezone=business.get("timezone", Settings.timezone),
        daily_lookback_days=reports.get("daily_lookback_days", Settings.daily_lookback_days),
        summary_lookback_days=reports.get("summary_lookback_days", Settings.summary_lookback_days),
        recent_costs_limit=reports.get("recent_costs_limit", Settings.recent_costs_limit),
        csv_delimiter=export.get("csv_delimiter", Settings.csv_delimiter),
        session_ttl_minutes=auth.get("session_ttl_minutes", Settings.session_ttl_minutes),
        roles=config.get("roles") or dict(DEFAULT_ROLES),
    )

    settings.service_role_key = os.getenv("BOOKKEEPING_SERVICE_ROLE_KEY") or None
    settings.environment = os.getenv("ENVIRONMENT", settings.environment)
    settings.log_level = os.getenv("LOG_LEVEL", settings.log_level)
    if os.getenv("CORS_ORIGINS"):
        settings.cors_origins = os.getenv("CORS_ORIGINS").split(",")

    if not settings.service_role_key:
        logger.warning("BOOKKEEPING_SERVICE_ROLE_KEY is not set; admin user creation is disabled")

    return settings


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded once."""
    return load_settings()
