"""
Timezone-aware datetime utilities.

All datetime operations should use these helpers to ensure consistent
timezone handling across the codebase.
"""
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

# strftime patterns matching each locale's short date + 24h/12h time rendering
LOCALE_FORMATS = {
    "fr": "%d/%m/%Y %H:%M:%S",
    "en": "%m/%d/%Y, %I:%M:%S %p",
    "de": "%d.%m.%Y, %H:%M:%S",
    "cs": "%d. %m. %Y %H:%M:%S",
}

SUPPORTED_LOCALES = frozenset(LOCALE_FORMATS)

DEFAULT_LOCALE = "fr"


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Use this instead of datetime.utcnow() which returns naive datetime.
    """
    return datetime.now(timezone.utc)


def format_timestamp(
    value: datetime,
    locale: str = DEFAULT_LOCALE,
    tz: Optional[str] = None,
) -> str:
    """
    Render a timestamp the way the given locale writes date and time.

    Args:
        value: The moment to render (naive datetimes are assumed UTC)
        locale: One of SUPPORTED_LOCALES
        tz: IANA time zone name to convert to before rendering

    Returns:
        Formatted string, e.g. "17/10/2026 14:03:22" for "fr"

    Raises:
        ValueError: If the locale is not supported
    """
    try:
        pattern = LOCALE_FORMATS[locale]
    except KeyError:
        raise ValueError(f"Unsupported locale: {locale}")

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if tz:
        value = value.astimezone(ZoneInfo(tz))

    return value.strftime(pattern)
