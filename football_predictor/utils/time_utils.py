from datetime import datetime
from typing import Optional

from pytz import timezone, utc

from football_predictor.config import get_settings


def get_app_timezone():
    """Configured application timezone (APP_TIMEZONE, UTC by default)."""
    return timezone(get_settings().timezone)


def get_current_time() -> datetime:
    """Get current time in the application timezone."""
    return datetime.now(get_app_timezone())


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp from a provider record.

    Naive values are taken as UTC; unreadable values give None.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = utc.localize(parsed)
    return parsed
