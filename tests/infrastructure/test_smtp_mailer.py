"""SmtpMailer — message construction and aiosmtplib error mapping."""

import aiosmtplib
import pytest

from app.config import Settings
from app.core.email_templates import OutgoingEmail
from app.core.errors import EmailDeliveryError, ErrorContext
from app.infrastructure.mailer import SmtpMailer

EMAIL = OutgoingEmail(
    to="ada@example.com", subject="Thanks", text="Hello Ada", reply_to="staff@x.test",
)


def _mailer(**overrides) -> SmtpMailer:
    kwargs = dict(
        smtp_host="smtp.test", smtp_port=465,
        email_user="info@techalphahub.test", email_pass="pw",
    )
    kwargs.update(overrides)
    settings = Settings(**kwargs)
    return SmtpMailer.from_settings(settings)


def test_build_message_sets_branded_from_header():
    msg = _mailer().build_message(EMAIL)
    assert msg["From"] == "TechAlpha Hub <info@techalphahub.test>"
    assert msg["To"] == "ada@example.com"
    assert msg["Subject"] == "Thanks"
    assert msg["Reply-To"] == "staff@x.test"
    assert msg.get_content().strip() == "Hello Ada"


async def test_send_passes_connection_settings(monkeypatch):
    calls = []

    async def fake_send(message, **kwargs):
        calls.append((message, kwargs))

    monkeypatch.setattr(aiosmtplib, "send", fake_send)

    await _mailer().send(EMAIL)

    message, kwargs = calls[0]
    assert message["To"] == "ada@example.com"
    assert kwargs["hostname"] == "smtp.test"
    assert kwargs["port"] == 465
    assert kwargs["username"] == "info@techalphahub.test"
    assert kwargs["password"] == "pw"
    assert kwargs["use_tls"] is True
    assert kwargs["start_tls"] is False


async def test_starttls_mode(monkeypatch):
    calls = []

    async def fake_send(message, **kwargs):
        calls.append(kwargs)

    monkeypatch.setattr(aiosmtplib, "send", fake_send)

    await _mailer(smtp_use_tls=False, smtp_start_tls=True, smtp_port=587).send(EMAIL)

    assert calls[0]["use_tls"] is False
    assert calls[0]["start_tls"] is True
    assert calls[0]["port"] == 587


@pytest.mark.parametrize(
    "failure",
    [
        aiosmtplib.SMTPAuthenticationError(535, "authentication failed"),
        aiosmtplib.SMTPRecipientsRefused([]),
        ConnectionRefusedError("refused"),
    ],
)
async def test_transport_failures_map_to_email_delivery_error(monkeypatch, failure):
    async def fake_send(message, **kwargs):
        raise failure

    monkeypatch.setattr(aiosmtplib, "send", fake_send)
    ctx = ErrorContext(submission_type="contact")

    with pytest.raises(EmailDeliveryError) as exc:
        await _mailer().send(EMAIL, context=ctx)
    assert exc.value.recipient == "ada@example.com"
    assert exc.value.context.submission_type == "contact"


async def test_unsendable_header_maps_to_email_delivery_error(monkeypatch):
    calls = []

    async def fake_send(message, **kwargs):
        calls.append(message)

    monkeypatch.setattr(aiosmtplib, "send", fake_send)
    broken = OutgoingEmail(to="ada@example.com", subject="Hi\nBcc: x@y.test", text="t")

    with pytest.raises(EmailDeliveryError) as exc:
        await _mailer().send(broken)
    assert exc.value.recipient == "ada@example.com"
    assert calls == []
