# athlete_intake/services/notification.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from athlete_intake.core.settings import Settings
from athlete_intake.schemas.submission import SubmissionPayload
from athlete_intake.services.addresses import Address, InvalidAddress, parse_address
from athlete_intake.services.email import EmailConfigError, send_resend_email
from athlete_intake.templates import render_template


@dataclass(frozen=True)
class EmailEnvelope:
    sender: str
    to: str
    subject: str
    html: str
    reply_to: Optional[str] = None


def resolve_addresses(settings: Settings) -> tuple[Address, Address]:
    """Sender and owner address, validated before anything is rendered or sent."""
    if not settings.RESEND_API_KEY:
        raise EmailConfigError("RESEND_API_KEY not configured.")
    if not settings.FROM_EMAIL or not settings.OWNER_EMAIL:
        raise EmailConfigError("FROM_EMAIL and OWNER_EMAIL must be configured.")

    try:
        sender = parse_address(settings.FROM_EMAIL)
    except InvalidAddress as e:
        raise EmailConfigError(f"FROM_EMAIL is not a valid address: {settings.FROM_EMAIL}") from e
    try:
        owner = parse_address(settings.OWNER_EMAIL)
    except InvalidAddress as e:
        raise EmailConfigError(f"OWNER_EMAIL is not a valid address: {settings.OWNER_EMAIL}") from e
    return sender, owner


def build_subject(settings: Settings, payload: SubmissionPayload) -> str:
    name = payload.form.player_name
    return f"{settings.EMAIL_SUBJECT} - {name}" if name else settings.EMAIL_SUBJECT


def render_submission_html(payload: SubmissionPayload, submitted_at: Optional[datetime] = None) -> str:
    submitted_at = submitted_at or datetime.now(timezone.utc)
    return render_template(
        "submission_email.html",
        {
            "submitted_at": submitted_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip(),
            "rows": payload.form.rows(),
            "image_urls": payload.image_urls,
            "video_urls": payload.video_urls,
        },
    )


def build_envelope(
    settings: Settings,
    payload: SubmissionPayload,
    submitted_at: Optional[datetime] = None,
) -> EmailEnvelope:
    sender, owner = resolve_addresses(settings)
    return EmailEnvelope(
        sender=sender.formatted(),
        to=owner.email,
        subject=build_subject(settings, payload),
        html=render_submission_html(payload, submitted_at),
        # SubmissionForm already validated the submitter address
        reply_to=payload.form.email,
    )


def notify_owner(settings: Settings, payload: SubmissionPayload) -> str:
    """Render and send the owner notification; returns the provider message id."""
    envelope = build_envelope(settings, payload)
    return send_resend_email(
        settings=settings,
        sender=envelope.sender,
        to=envelope.to,
        subject=envelope.subject,
        html_body=envelope.html,
        reply_to=envelope.reply_to,
    )
