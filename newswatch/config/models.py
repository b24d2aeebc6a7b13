"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


DEFAULT_COUNTRIES = [
    "United States",
    "China",
    "Russia",
    "India",
    "Japan",
    "South Korea",
    "North Korea",
    "UK",
    "France",
    "Germany",
    "Israel",
    "Iran",
    "Saudi Arabia",
    "Ukraine",
    "Taiwan",
    "Canada",
    "Australia",
    "Brazil",
    "Mexico",
    "Egypt",
    "South Africa",
    "Nigeria",
    "Pakistan",
    "Indonesia",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


class PostgresConfig(BaseModel):
    """Postgres configuration."""

    host: str = Field("localhost", description="Database host")
    port: int = Field(5432, description="Database port")
    database: str = Field("newswatch", description="Database name")
    user: str = Field("newswatch", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    password_env: Optional[str] = Field(None, description="Environment variable for password")
    pool_max_size: int = Field(10, description="Maximum pooled connections", ge=1)
    dsn_env: Optional[str] = Field(
        None, description="Environment variable holding a full connection string"
    )


class StorageConfig(BaseModel):
    """Content store (Google Cloud Storage) configuration."""

    bucket: Optional[str] = Field(None, description="GCS bucket for article bodies")
    bucket_env: Optional[str] = Field(None, description="Environment variable for bucket name")
    project: Optional[str] = Field(None, description="GCP project (defaults to ADC project)")
    key_prefix: str = Field("articles", description="Key prefix for stored bodies")
    signed_url_expiry_seconds: int = Field(
        3600, description="Default lifetime of signed content URLs", ge=1, le=604800
    )


class CrawlConfig(BaseModel):
    """Crawl cycle parameters."""

    interval_hours: float = Field(6.0, description="Hours between scheduled cycles", gt=0)
    page_timeout_ms: int = Field(60000, description="Navigation timeout per page", ge=1000)
    settle_ms: int = Field(3000, description="Wait after navigation before extracting", ge=0)
    courtesy_delay_seconds: float = Field(
        2.0, description="Pause between article fetches within a source", ge=0.0
    )
    max_articles_per_source: Optional[int] = Field(
        None, description="Cap on article pages fetched per source", ge=1
    )
    headless: bool = Field(True, description="Run the browser headless")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="Browser user agent")
    excerpt_length: int = Field(200, description="Inline excerpt length", ge=1)


class APIConfig(BaseModel):
    """HTTP server configuration."""

    host: str = Field("127.0.0.1", description="Bind address")
    port: int = Field(8000, description="Bind port")


class ConfigModel(BaseModel):
    """Main configuration model."""

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    crawl: CrawlConfig = Field(default_factory=CrawlConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    countries: List[str] = Field(
        default_factory=lambda: list(DEFAULT_COUNTRIES),
        description="Country names matched against article bodies",
    )

    @field_validator("countries")
    @classmethod
    def validate_countries(cls, v: List[str]) -> List[str]:
        """Drop blanks and repeats, keeping order."""
        seen = set()
        result = []
        for name in v:
            name = name.strip()
            if name and name.lower() not in seen:
                seen.add(name.lower())
                result.append(name)
        return result


class SourceConfig(BaseModel):
    """Source configuration from sources.yaml."""

    name: str = Field(..., description="Source label stored on each article")
    landing_url: str = Field(..., description="Page listing the latest articles")
    base_url: str = Field(..., description="Origin used to resolve relative links")
    link_selectors: List[str] = Field(default_factory=list, description="Article link selectors")
    link_prefixes: List[str] = Field(
        default_factory=list, description="Accepted article path prefixes (empty: any path)"
    )
    title_selectors: List[str] = Field(default_factory=lambda: ["h1"])
    body_selectors: List[str] = Field(default_factory=lambda: ["article p"])
    date_selectors: List[str] = Field(default_factory=lambda: ["time"])
    enabled: bool = Field(True, description="Whether source is enabled")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Store the origin without a trailing slash."""
        return v.rstrip("/")
