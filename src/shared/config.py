"""Configuration management using Pydantic Settings.

Loads configuration from environment variables with validation.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    api_title: str = Field(default="Busuanzi Counter Sync", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")
    api_description: str = Field(
        default="Re-synchronize site visitor and page-view counters from Busuanzi",
        description="API description",
    )

    # Busuanzi Configuration
    busuanzi_base_url: str = Field(
        default="https://busuanzi.ibruce.info/busuanzi",
        description="Busuanzi JSONP endpoint",
    )
    busuanzi_timeout: float = Field(
        default=10.0, ge=1.0, le=120.0, description="Timeout for Busuanzi calls in seconds"
    )
    busuanzi_max_retries: int = Field(
        default=2, ge=0, le=10, description="Retries for transient Busuanzi failures"
    )
    busuanzi_retry_initial_delay: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Initial backoff delay in seconds before retrying Busuanzi",
    )
    busuanzi_user_agent: str = Field(
        default=(
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
        ),
        description="User-Agent sent to Busuanzi (it rejects non-browser agents)",
    )

    # Storage Configuration
    data_file: str = Field(
        default="./data/store.json",
        description="JSON document holding domains, counters and sessions",
    )

    # Session Configuration
    session_cookie_name: str = Field(
        default="session_token", description="Cookie carrying the session token"
    )

    # CORS Configuration
    cors_allowed_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # Logging
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )
