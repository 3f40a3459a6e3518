"""Settings — URL normalization and staff inbox fallback."""

import pytest

from app.config import Settings


@pytest.mark.parametrize(
    "raw",
    ["postgres://u:p@h:5432/d", "postgresql://u:p@h:5432/d"],
)
def test_postgres_urls_get_asyncpg_driver(raw):
    assert Settings(database_url=raw).database_url == "postgresql+asyncpg://u:p@h:5432/d"


def test_other_urls_untouched():
    url = "sqlite+aiosqlite:///local.db"
    assert Settings(database_url=url).database_url == url


def test_staff_inbox_falls_back_to_sender_mailbox():
    settings = Settings(email_user="info@example.com", notify_inbox=None)
    assert settings.staff_inbox == "info@example.com"


def test_staff_inbox_override():
    settings = Settings(email_user="info@example.com", notify_inbox="team@example.com")
    assert settings.staff_inbox == "team@example.com"
