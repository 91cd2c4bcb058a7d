"""
Tests for datetime_utils module.
"""
import pytest
from datetime import datetime, timezone, timedelta
from beaverdoc.utils.datetime_utils import (
    utc_now,
    format_timestamp,
    SUPPORTED_LOCALES,
)

MOMENT = datetime(2026, 10, 17, 12, 3, 22, tzinfo=timezone.utc)


class TestUtcNow:
    """Test utc_now() function."""

    def test_returns_timezone_aware(self):
        """utc_now() returns timezone-aware datetime."""
        now = utc_now()
        assert now.tzinfo is not None
        assert now.tzinfo == timezone.utc

    def test_returns_utc(self):
        """utc_now() returns UTC time."""
        now = utc_now()
        diff = abs((now - datetime.now(timezone.utc)).total_seconds())
        assert diff < 1


class TestFormatTimestamp:
    """Test format_timestamp() function."""

    def test_french_in_paris(self):
        """fr renders DD/MM/YYYY HH:MM:SS in local time."""
        assert format_timestamp(MOMENT, "fr", "Europe/Paris") == "17/10/2026 14:03:22"

    def test_without_timezone_keeps_utc(self):
        assert format_timestamp(MOMENT, "fr") == "17/10/2026 12:03:22"

    def test_naive_is_treated_as_utc(self):
        naive = MOMENT.replace(tzinfo=None)
        assert format_timestamp(naive, "fr", "Europe/Paris") == "17/10/2026 14:03:22"

    def test_winter_offset(self):
        """Paris is UTC+1 in winter."""
        january = datetime(2026, 1, 5, 8, 0, 0, tzinfo=timezone.utc)
        assert format_timestamp(january, "fr", "Europe/Paris") == "05/01/2026 09:00:00"

    def test_other_offset_input(self):
        """Aware input in another zone is converted, not relabelled."""
        tokyo = MOMENT.astimezone(timezone(timedelta(hours=9)))
        assert format_timestamp(tokyo, "fr", "Europe/Paris") == "17/10/2026 14:03:22"

    @pytest.mark.parametrize("locale,expected", [
        ("en", "10/17/2026, 12:03:22 PM"),
        ("de", "17.10.2026, 12:03:22"),
        ("cs", "17. 10. 2026 12:03:22"),
    ])
    def test_other_locales(self, locale, expected):
        assert format_timestamp(MOMENT, locale) == expected

    def test_all_supported_locales_render(self):
        for locale in SUPPORTED_LOCALES:
            assert "2026" in format_timestamp(MOMENT, locale)

    def test_unknown_locale(self):
        with pytest.raises(ValueError):
            format_timestamp(MOMENT, "xx")
