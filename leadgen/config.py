"""Configuration management using Pydantic BaseSettings."""
from pathlib import Path
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )

    # API keys
    jigsawstack_api_key: str = Field(default="", alias="JIGSAWSTACK_API_KEY")
    crunchbase_api_key: str = Field(default="", alias="CRUNCHBASE_API_KEY")
    linkedin_api_key: str = Field(default="", alias="LINKEDIN_API_KEY")
    apollo_api_key: str = Field(default="", alias="APOLLO_API_KEY")
    hubspot_access_token: str = Field(default="", alias="HUBSPOT_ACCESS_TOKEN")

    # Provider base URLs
    jigsawstack_base_url: str = Field(default="https://api.jigsawstack.com/v1", alias="JIGSAWSTACK_BASE_URL")
    crunchbase_base_url: str = Field(default="https://api.crunchbase.com/v3.1", alias="CRUNCHBASE_BASE_URL")
    linkedin_base_url: str = Field(default="https://api.linkedin.com/v2", alias="LINKEDIN_BASE_URL")
    builtwith_base_url: str = Field(default="https://builtwith.com/api/v3/free", alias="BUILTWITH_BASE_URL")
    apollo_base_url: str = Field(default="https://api.apollo.io/api/v1", alias="APOLLO_BASE_URL")
    hubspot_base_url: str = Field(default="https://api.hubapi.com", alias="HUBSPOT_BASE_URL")

    # HTTP policy shared by every API client
    http_timeout: float = Field(default=30.0, alias="HTTP_TIMEOUT")
    http_max_retries: int = Field(default=3, alias="HTTP_MAX_RETRIES")
    http_retry_min_wait: float = Field(default=2.0, alias="HTTP_RETRY_MIN_WAIT")
    http_retry_max_wait: float = Field(default=10.0, alias="HTTP_RETRY_MAX_WAIT")
    http_min_interval_ms: int = Field(default=333, alias="HTTP_MIN_INTERVAL_MS")
    http_max_concurrent: int = Field(default=5, alias="HTTP_MAX_CONCURRENT")

    # Data paths
    data_dir: Path = Field(default_factory=lambda: Path("./data"), alias="DATA_DIR")
    out_dir: Path = Field(default_factory=lambda: Path("./out"), alias="OUT_DIR")
    logs_dir: Path = Field(default_factory=lambda: Path("./logs"), alias="LOGS_DIR")

    # Database
    db_path: Path = Field(default_factory=lambda: Path("./data/leadgen.duckdb"), alias="DB_PATH")

    # Lead list
    leads_per_page: int = Field(default=10, alias="LEADS_PER_PAGE")
    page_window: int = Field(default=2, alias="PAGE_WINDOW")
    # Fallbacks applied to company rows before scoring; None leaves the field absent
    list_default_rank_metric: Optional[int] = Field(default=None, alias="LIST_DEFAULT_RANK_METRIC")
    list_default_industry: Optional[str] = Field(default=None, alias="LIST_DEFAULT_INDUSTRY")

    # Profile scraping
    scrape_interval_days: int = Field(default=7, alias="SCRAPE_INTERVAL_DAYS")
    scrape_delay_seconds: float = Field(default=1.0, alias="SCRAPE_DELAY_SECONDS")

    # CRM push (comma-separated score statuses)
    crm_push_statuses_csv: str = Field(default="hot,warm", alias="CRM_PUSH_STATUSES")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Ensure directories exist
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.out_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def duckdb_path(self) -> str:
        """Return DuckDB path as string."""
        return str(self.db_path)

    @property
    def http_min_interval(self) -> float:
        """Minimum spacing between request starts, in seconds."""
        return self.http_min_interval_ms / 1000.0

    @property
    def crm_push_statuses(self) -> List[str]:
        """Score statuses pushed to the CRM by the push job."""
        return [s.strip().lower() for s in self.crm_push_statuses_csv.split(",") if s.strip()]


# Global settings instance
settings = Settings()
