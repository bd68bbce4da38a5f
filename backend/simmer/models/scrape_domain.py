"""Per-site crawl policy and running stats."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, Integer, String, Text

from simmer.models.base import Base, TimestampMixin, UUIDMixin


class ScrapeDomain(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "scrape_domains"

    domain = Column(String(255), unique=True, nullable=False, index=True)  # hostname without www.

    # Crawl policy
    is_enabled = Column(Boolean, default=True, nullable=False)
    rate_limit_seconds = Column(Float, default=5.0, nullable=False)
    sitemap_url = Column(Text)

    # Crawl state
    sitemap_last_fetched = Column(DateTime(timezone=True))
    last_scraped_at = Column(DateTime(timezone=True))
    successful_scrapes = Column(Integer, default=0, nullable=False)
    failed_scrapes = Column(Integer, default=0, nullable=False)

    __table_args__ = (
        CheckConstraint("rate_limit_seconds >= 0", name="ck_domain_rate_limit"),
    )
