"""Configuration management via environment variables.

Reads from .env file (via pydantic-settings) with sensible defaults.
All values can be overridden via environment variables.

Required:
    FMP_API_KEY       — Financial Modeling Prep API key

Optional:
    FMP_BASE_URL      — API root (defaults to the public v3 endpoint)
    DASHBOARD_SYMBOL  — Ticker whose income statements are shown
    STATEMENT_PERIOD  — Statement period requested from the API
    REQUEST_TIMEOUT   — Seconds to wait for the API response
    LOG_LEVEL         — Root logging level for the entry points
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Financial Modeling Prep credential (a missing key surfaces as a fetch error)
    fmp_api_key: str = ""
    fmp_base_url: str = "https://financialmodelingprep.com/api/v3"

    dashboard_symbol: str = "AAPL"
    statement_period: str = "annual"

    request_timeout: float = 30.0
    log_level: str = "INFO"

    # Strip whitespace from string fields — the .env file often has
    # trailing spaces or quotes that break the API key
    @field_validator("fmp_api_key", "fmp_base_url", "dashboard_symbol", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().strip('"').strip("'").strip()
        return v

    @field_validator("dashboard_symbol")
    @classmethod
    def upper_symbol(cls, v: str) -> str:
        return v.upper()

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_config: Settings | None = None


def get_config() -> Settings:
    """Get or create the shared Settings singleton."""
    global _config
    if _config is None:
        _config = Settings()
    return _config


def reset_config() -> None:
    """Drop the cached Settings so the next get_config() re-reads the environment."""
    global _config
    _config = None
