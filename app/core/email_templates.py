"""Email Composition — pure builders for confirmation and staff-notification emails.

Invariants:
    - All functions are pure (no IO, no SMTP, no DB)
    - Submitter confirmations go to the address the submitter typed
    - Staff notifications list every submitted field, one per line

Design Decisions:
    - Plain-text bodies only: matches what the site has always sent
    - Builders take plain keyword data, not ORM objects, so core/ stays free of models/
"""

from dataclasses import dataclass

BRAND = "TechAlpha Hub"
SIGN_OFF = f"Best regards,\n{BRAND} Team"


@dataclass(frozen=True)
class OutgoingEmail:
    """A composed email, ready for the mailer."""
    to: str
    subject: str
    text: str
    reply_to: str | None = None


def contact_confirmation(*, name: str, email: str, message: str) -> OutgoingEmail:
    """Thank-you email echoing the contact message back."""
    return OutgoingEmail(
        to=email,
        subject=f"Thank You for Contacting {BRAND}",
        text=(
            f"Hello {name},\n\n"
            "Thank you for reaching out to us. We have received your message:\n"
            f"\"{message}\"\n\n"
            "We'll get back to you soon.\n\n"
            f"{SIGN_OFF}"
        ),
    )


def partnering_confirmation(
    *, first_name: str, email: str, program: str,
) -> OutgoingEmail:
    """Acknowledge a partnership application."""
    return OutgoingEmail(
        to=email,
        subject=f"Your Partnership Application to {BRAND}",
        text=(
            f"Hello {first_name},\n\n"
            f"Thank you for your interest in partnering with {BRAND} on the "
            f"{program} program. Our team will review your application and "
            "contact you shortly.\n\n"
            f"{SIGN_OFF}"
        ),
    )


_SUBMISSION_TITLES = {
    "contact": "New contact message",
    "enrollment": "New class enrollment",
    "partnering": "New partnership application",
}


def staff_notification(
    submission_type: str,
    *,
    inbox: str,
    fields: dict[str, str | None],
    reply_to: str | None = None,
) -> OutgoingEmail:
    """Internal heads-up for the business inbox.

    `fields` is rendered in insertion order; None values are skipped.
    """
    title = _SUBMISSION_TITLES.get(submission_type, "New submission")
    lines = [
        f"{_label(key)}: {value}"
        for key, value in fields.items()
        if value is not None
    ]
    who = _display_name(fields)
    subject = f"{title} from {who}" if who else title
    return OutgoingEmail(
        to=inbox,
        subject=subject,
        text=f"{title}\n\n" + "\n".join(lines),
        reply_to=reply_to,
    )


def _label(key: str) -> str:
    return key.replace("_", " ").capitalize()


def _display_name(fields: dict[str, str | None]) -> str:
    """Name for the subject line, collapsed onto one line."""
    if fields.get("name"):
        return _one_line(fields["name"])
    parts = [fields.get("first_name"), fields.get("last_name")]
    return _one_line(" ".join(p for p in parts if p))


def _one_line(value: str) -> str:
    # Header values may not contain CR/LF
    return " ".join(value.split())
