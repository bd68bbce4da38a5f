"""Scrape queue model."""

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String, Text

from simmer.models.base import Base, TimestampMixin, UUIDMixin, utcnow

QUEUE_STATUSES = ("pending", "processing", "completed", "failed", "skipped")
TERMINAL_STATUSES = ("completed", "failed", "skipped")


class ScrapeQueueItem(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "scrape_queue"

    url = Column(Text, unique=True, nullable=False)
    domain = Column(String(255), nullable=False, index=True)

    status = Column(String(20), nullable=False, default="pending")  # pending, processing, completed, failed, skipped
    priority = Column(Integer, nullable=False, default=0)  # higher first; discovery 0, manual seed 10
    attempts = Column(Integer, nullable=False, default=0)
    max_attempts = Column(Integer, nullable=False, default=3)
    last_error = Column(Text)

    scheduled_for = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    completed_at = Column(DateTime(timezone=True))

    __table_args__ = (
        CheckConstraint("attempts <= max_attempts", name="ck_queue_attempts_cap"),
        Index("idx_queue_due", "status", "scheduled_for"),
        Index("idx_queue_priority", "status", "priority"),
    )
