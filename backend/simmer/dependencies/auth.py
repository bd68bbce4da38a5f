"""Authentication dependencies for the trigger endpoints."""

import logging
import secrets

from fastapi import Depends, Header, HTTPException

from simmer.config import Settings, get_settings

logger = logging.getLogger(__name__)


def verify_cron_secret(
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Require ``Authorization: Bearer <cron_secret>``.

    An unset secret fails closed with a 500 rather than leaving the
    trigger endpoints open.
    """
    if not settings.cron_secret:
        logger.error("CRON_SECRET is not configured; refusing trigger request")
        raise HTTPException(status_code=500, detail="Server misconfigured")

    expected = f"Bearer {settings.cron_secret}"
    if not authorization or not secrets.compare_digest(authorization.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")
