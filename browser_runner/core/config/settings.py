"""Application settings with Pydantic validation."""

from typing import Any, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RunnerSettings(BaseSettings):
    """Run engine settings with validation and environment variable support."""

    # Environment
    env: str = Field(
        default="production", description="Environment (production, development, testing)"
    )

    @model_validator(mode="before")
    @classmethod
    def default_env_for_pytest(cls, data: Any) -> Any:
        """Auto-detect testing environment when running under pytest."""
        import sys

        if not isinstance(data, dict):
            return data

        if ("env" not in data or not data.get("env")) and "pytest" in sys.modules:
            data["env"] = "testing"

        return data

    # Logging
    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_json: bool = Field(default=True, description="Write JSON lines to the log file")
    logs_dir: str = Field(default="logs", description="Directory for log files")

    # Database Configuration
    database_url: str = Field(
        default="postgresql://localhost:5432/browser_automation",
        description="PostgreSQL database connection URL",
    )
    db_pool_size: int = Field(default=10, ge=1, le=100, description="Database connection pool size")

    # Browser sessions
    headless: bool = Field(default=True, description="Launch Chromium headless")
    proxy_required: bool = Field(
        default=True, description="Fail runs whose user has no assigned proxy"
    )
    viewport_width: int = Field(default=1920, ge=320)
    viewport_height: int = Field(default=1080, ge=240)
    stealth_enabled: bool = Field(default=True, description="Inject stealth init scripts")

    # Step-level retry
    step_retry_attempts: int = Field(default=4, ge=1, le=10)
    step_retry_base_delay: float = Field(
        default=3.0, ge=0, description="Base backoff delay in seconds (delay = base * 2**k)"
    )

    # Human behaviour
    human_time_scale: float = Field(
        default=1.0, ge=0, description="Multiplier applied to every human-scale pause"
    )
    typing_wpm_min: int = Field(default=40, ge=1)
    typing_wpm_max: int = Field(default=80, ge=1)
    click_delay_min: float = Field(default=0.1, ge=0)
    click_delay_max: float = Field(default=0.5, ge=0)

    # Action limits
    max_connections: int = Field(
        default=100, ge=1, description="Default cap on profiles collected by FIND_CONNECTIONS"
    )
    download_poll_interval: float = Field(
        default=180.0, ge=0, description="Seconds between data-archive readiness checks"
    )
    download_max_polls: int = Field(default=20, ge=1)

    # Dispatch
    single_writer_check: bool = Field(
        default=True,
        description="Fail a run when another run is already driving the same browser config",
    )
    dispatch_concurrency: int = Field(default=4, ge=1, le=64)
    dispatch_batch_size: int = Field(default=50, ge=1)
    dispatch_interval: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value."""
        allowed = ["production", "development", "testing", "staging"]
        if v.lower() not in allowed:
            raise ValueError(f'ENV must be one of: {", ".join(allowed)}')
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f'LOG_LEVEL must be one of: {", ".join(allowed)}')
        return v_upper

    @model_validator(mode="after")
    def validate_ranges(self) -> "RunnerSettings":
        """Ensure min/max pairs are ordered."""
        if self.typing_wpm_min > self.typing_wpm_max:
            raise ValueError("typing_wpm_min must not exceed typing_wpm_max")
        if self.click_delay_min > self.click_delay_max:
            raise ValueError("click_delay_min must not exceed click_delay_max")
        return self

    def is_development(self) -> bool:
        """Check if running in a development-like environment."""
        return self.env in ("development", "testing")

    def is_production(self) -> bool:
        """Check if running in production."""
        return self.env == "production"

    def human_behavior(self) -> dict:
        """Config dictionary for HumanSimulator."""
        return {
            "time_scale": self.human_time_scale,
            "typing_wpm_range": [self.typing_wpm_min, self.typing_wpm_max],
            "click_delay_range": [self.click_delay_min, self.click_delay_max],
        }


_settings: Optional[RunnerSettings] = None


def get_settings() -> RunnerSettings:
    """
    Get application settings singleton.

    Returns:
        RunnerSettings instance
    """
    global _settings
    if _settings is None:
        _settings = RunnerSettings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (used by tests)."""
    global _settings
    _settings = None
