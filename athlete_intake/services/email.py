# athlete_intake/services/email.py
from __future__ import annotations

import json
from typing import Any, Dict, Optional

import requests

from athlete_intake.core.logging_config import logger
from athlete_intake.core.settings import Settings


class EmailError(RuntimeError):
    pass


class EmailConfigError(EmailError):
    """Provider key or sender/owner address missing or malformed."""


class EmailProviderError(EmailError):
    """The provider answered, but refused the message."""

    def __init__(self, message: str, status_code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.data = data


class EmailTransportError(EmailError):
    """The provider could not be reached."""


def send_resend_email(
    *,
    settings: Settings,
    sender: str,
    to: str,
    subject: str,
    html_body: str,
    reply_to: Optional[str] = None,
) -> str:
    """
    Returns the Resend message id on success.
    Raises EmailConfigError / EmailProviderError / EmailTransportError.
    """
    if not settings.RESEND_API_KEY:
        raise EmailConfigError("RESEND_API_KEY not configured.")

    payload: Dict[str, Any] = {
        "from": sender,
        "to": [to],
        "subject": subject,
        "html": html_body,
    }
    if reply_to:
        payload["reply_to"] = reply_to

    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Authorization": f"Bearer {settings.RESEND_API_KEY}",
    }

    try:
        r = requests.post(
            settings.RESEND_API_URL,
            headers=headers,
            data=json.dumps(payload),
            timeout=settings.EMAIL_TIMEOUT_SEC,
        )
    except requests.RequestException as e:
        raise EmailTransportError(f"{type(e).__name__}: {e}") from e

    try:
        data = r.json()
    except ValueError:
        data = {"raw": r.text}

    if r.status_code >= 300:
        # Resend returns {"statusCode", "name", "message"}
        message = (data.get("message") if isinstance(data, dict) else None) or "Resend reported an error."
        logger.warning("email_rejected", status_code=r.status_code, provider_error=message)
        raise EmailProviderError(message, status_code=r.status_code, data=data)

    message_id = str((data or {}).get("id") or "")
    if not message_id:
        raise EmailProviderError("Resend response did not contain a message id.", r.status_code, data)

    logger.info("email_sent", id=message_id, to=to)
    return message_id
