"""Pydantic schemas for the trigger endpoints, queue and domain config."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlparse
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes as camelCase on the wire, accepts snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def validate_http_url(value: str) -> str:
    value = value.strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid URL format")
    return value


class DomainError(CamelModel):
    domain: str
    error: str


class UrlError(CamelModel):
    url: str
    error: str


class DiscoverResponse(CamelModel):
    """Response from a discovery run."""

    success: bool = True
    domains_processed: int = 0
    urls_discovered: int = 0
    urls_added: int = 0
    errors: list[DomainError] = []


class BatchResponse(CamelModel):
    """Response from a queue batch run."""

    success: bool = True
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[UrlError] = []


class ScrapeRequest(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_http_url(value)


class ScrapeResponse(CamelModel):
    success: bool
    url: str
    recipe_id: UUID | None = None
    error: str | None = None


class EnqueueRequest(BaseModel):
    urls: list[str] = Field(min_length=1)
    priority: int | None = None


class EnqueueResponse(CamelModel):
    added: int = 0
    skipped: int = 0
    invalid: list[str] = []


class QueueStats(CamelModel):
    """Queue counts by status plus stored recipe count."""

    pending: int = 0
    processing: int = 0
    completed: int = 0
    failed: int = 0
    skipped: int = 0
    recipes: int = 0


class ScrapeDomainRead(CamelModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: UUID
    domain: str
    is_enabled: bool
    rate_limit_seconds: float
    sitemap_url: str | None = None
    sitemap_last_fetched: datetime | None = None
    last_scraped_at: datetime | None = None
    successful_scrapes: int = 0
    failed_scrapes: int = 0
