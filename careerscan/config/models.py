"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Any, List, Optional
from urllib.parse import urlparse

from apscheduler.triggers.cron import CronTrigger
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]

DEFAULT_CRON_SCHEDULE = "0 */4 * * *"


class StrategyType(str, Enum):
    """Extraction strategies understood by the adapter registry."""

    MICROSOFT = "microsoft"
    AMAZON = "amazon"
    GENERIC = "generic"

    @classmethod
    def coerce(cls, value: Any) -> "StrategyType":
        """Map a raw strategy value onto the enum, falling back to GENERIC."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.GENERIC
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.GENERIC

    @classmethod
    def is_known(cls, value: Any) -> bool:
        if isinstance(value, cls):
            return True
        return isinstance(value, str) and value.strip().lower() in {m.value for m in cls}


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def validate_cron_expression(expression: str) -> str:
    """Check that a crontab expression can be scheduled.

    Raises:
        ValueError: If APScheduler rejects the expression
    """
    stripped = expression.strip()
    if not stripped:
        raise ValueError("Cron expression cannot be empty")
    try:
        CronTrigger.from_crontab(stripped)
    except ValueError as e:
        raise ValueError(f"Invalid cron expression '{stripped}': {e}") from e
    return stripped


class SelectorConfig(BaseModel):
    """CSS selector bindings used by the generic adapter."""

    list_item: str = Field(..., min_length=1, description="Selector for job listing nodes")
    title: Optional[str] = Field(None, description="Selector for the title inside a listing node")
    company: Optional[str] = Field(None, description="Selector for company nodes (paired by index)")

    @field_validator("list_item", "title", "company")
    @classmethod
    def strip_selector(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None

    model_config = {"frozen": True}


class SourceConfig(BaseModel):
    """A career portal to scrape."""

    name: str = Field(..., min_length=1, description="Unique human-readable name for the source")
    search_url: str = Field(
        ..., description="Search URL, optionally containing a {keywords} placeholder"
    )
    strategy: StrategyType = Field(
        StrategyType.GENERIC, description="Extraction strategy (microsoft, amazon, generic)"
    )
    selectors: Optional[SelectorConfig] = Field(
        None, description="Selector bindings, required for the generic strategy"
    )
    enabled: bool = Field(True, description="Whether to scrape this source")

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def degrade_unknown_strategy(cls, data: Any) -> Any:
        """Unknown strategies fall back to generic instead of failing the load.

        A source that explicitly declares the generic strategy must also
        declare its selectors.
        """
        if not isinstance(data, dict):
            return data

        raw = data.get("strategy", StrategyType.GENERIC)
        declared_generic = raw is StrategyType.GENERIC or (
            isinstance(raw, str) and raw.strip().lower() == StrategyType.GENERIC.value
        )
        if declared_generic and not data.get("selectors"):
            raise ValueError("Sources using the generic strategy must define selectors")

        return {**data, "strategy": StrategyType.coerce(raw)}

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @field_validator("search_url")
    @classmethod
    def validate_search_url(cls, v: str) -> str:
        stripped = v.strip()
        parsed = urlparse(stripped)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"search_url must be an absolute http(s) URL, got: {v!r}")
        return stripped


class ScrapingConfig(BaseModel):
    """Browser, timing and request-budget settings."""

    headless: bool = Field(True, description="Run Chromium headless")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Fixed User-Agent header")
    browser_args: List[str] = Field(
        default_factory=lambda: list(DEFAULT_BROWSER_ARGS),
        description="Extra Chromium launch arguments",
    )
    viewport_width: int = Field(1920, ge=320, le=7680)
    viewport_height: int = Field(1080, ge=240, le=4320)
    navigation_timeout_ms: int = Field(
        30000, ge=1000, le=300000, description="Per-navigation timeout in milliseconds"
    )
    wait_until_idle: bool = Field(
        True, description="Wait for network idle instead of DOM content loaded"
    )
    settle_delay_ms: int = Field(
        3000, ge=0, le=60000, description="Wait after navigation on single-employer sites"
    )
    scroll_settle_ms: int = Field(
        2000, ge=0, le=60000, description="Wait after scrolling to the bottom"
    )
    generic_settle_ms: int = Field(
        2000, ge=0, le=60000, description="Wait after navigation on generic sites"
    )
    company_keyword_limit: int = Field(
        3, ge=1, le=50, description="Keywords tried per single-employer source"
    )
    generic_keyword_limit: int = Field(
        5, ge=1, le=50, description="Keywords tried per generic source"
    )
    company_delay_ms: int = Field(
        5000, ge=0, le=600000, description="Pause after each single-employer request"
    )
    generic_delay_ms: int = Field(
        2000, ge=0, le=600000, description="Pause after each generic request"
    )
    delay_override_ms: Optional[int] = Field(
        None, ge=0, le=600000, description="Single pause applied to every strategy (0 keeps the defaults)"
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class ExportConfig(BaseModel):
    """Where CSV exports are written."""

    directory: str = Field("output", min_length=1, description="Export directory")
    filename_prefix: str = Field("jobs", min_length=1, description="Export file name prefix")

    @field_validator("filename_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped or "/" in stripped or "\\" in stripped:
            raise ValueError("filename_prefix must be a plain file name fragment")
        return stripped


class ScheduleConfig(BaseModel):
    """Recurring trigger settings."""

    cron: str = Field(DEFAULT_CRON_SCHEDULE, description="Crontab expression")
    timezone: str = Field("America/New_York", min_length=1, description="Timezone for the cron")

    @field_validator("cron")
    @classmethod
    def check_cron(cls, v: str) -> str:
        return validate_cron_expression(v)


class EmailConfig(BaseModel):
    """Email notification settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    max_retries: int = Field(
        3, ge=0, le=10, description="Number of retry attempts for failed email sends"
    )
    retry_backoff_multiplier: float = Field(
        2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier for retries"
    )
    retry_initial_delay: int = Field(
        5, ge=1, le=60, description="Initial retry delay in seconds"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the Career Portal Scanner."""

    sources: List[SourceConfig] = Field(
        ..., min_length=1, description="Career portals to scrape, in visiting order"
    )
    keywords: List[str] = Field(..., min_length=1, description="Ordered search terms")
    scraping: ScrapingConfig = Field(default_factory=ScrapingConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: List[str]) -> List[str]:
        """Strip keywords and drop blanks, keeping order."""
        normalized = [term.strip() for term in v if isinstance(term, str) and term.strip()]
        if not normalized:
            raise ValueError("keywords must contain at least one non-empty term")
        return normalized

    @model_validator(mode="after")
    def validate_sources(self):
        """Require an enabled source and unique source names."""
        if not any(source.enabled for source in self.sources):
            raise ValueError(
                "At least one source must be enabled. All sources have enabled=false."
            )

        seen = set()
        for source in self.sources:
            key = source.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate source name: '{source.name}' appears multiple times")
            seen.add(key)

        return self

    def get_enabled_sources(self) -> List[SourceConfig]:
        """Get list of enabled sources in registry order."""
        return [source for source in self.sources if source.enabled]
