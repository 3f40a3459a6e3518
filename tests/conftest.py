"""Root conftest — shared test configuration."""

import os

# Ensure tests never talk to real SMTP servers, gateways or databases
os.environ.setdefault("PAYMENT_SECRET_KEY", "FLWSECK_TEST-fake-key-X")
os.environ.setdefault("EMAIL_USER", "info@techalphahub.test")
os.environ.setdefault("EMAIL_PASS", "not-a-real-password")
os.environ.setdefault("SMTP_HOST", "smtp.invalid")
os.environ.setdefault("NOTIFY_INBOX", "staff@techalphahub.test")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
