import pytest
import requests

from athlete_intake.services.email import (
    EmailConfigError,
    EmailProviderError,
    EmailTransportError,
    send_resend_email,
)
from tests.conftest import FakeResendResponse, make_settings


def _send(settings=None, **overrides):
    kwargs = {
        "settings": settings or make_settings(),
        "sender": "Athlete Intake <intake@example.com>",
        "to": "owner@example.com",
        "subject": "New video submission",
        "html_body": "<p>hi</p>",
    }
    kwargs.update(overrides)
    return send_resend_email(**kwargs)


def test_sends_payload_with_bearer_token(sent_emails):
    assert _send(reply_to="jane@example.com") == "email-1"

    call = sent_emails[0]
    assert call["url"] == "https://api.resend.com/emails"
    assert call["headers"]["Authorization"] == "Bearer re_test_key"
    assert call["timeout"] == 15
    assert call["payload"] == {
        "from": "Athlete Intake <intake@example.com>",
        "to": ["owner@example.com"],
        "subject": "New video submission",
        "html": "<p>hi</p>",
        "reply_to": "jane@example.com",
    }


def test_reply_to_is_omitted_when_absent(sent_emails):
    _send()
    assert "reply_to" not in sent_emails[0]["payload"]


def test_missing_api_key_fails_before_any_request(sent_emails):
    with pytest.raises(EmailConfigError):
        _send(settings=make_settings(RESEND_API_KEY=None))
    assert sent_emails == []


def test_provider_rejection_is_a_provider_error(monkeypatch):
    monkeypatch.setattr(
        "athlete_intake.services.email.requests.post",
        lambda *a, **kw: FakeResendResponse(
            422, {"statusCode": 422, "name": "validation_error", "message": "Invalid `from` field."}
        ),
    )
    with pytest.raises(EmailProviderError) as exc:
        _send()
    assert str(exc.value) == "Invalid `from` field."
    assert exc.value.status_code == 422


def test_provider_answer_without_id_is_a_provider_error(monkeypatch):
    monkeypatch.setattr(
        "athlete_intake.services.email.requests.post",
        lambda *a, **kw: FakeResendResponse(200, {}),
    )
    with pytest.raises(EmailProviderError):
        _send()


def test_network_failure_is_a_transport_error(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr("athlete_intake.services.email.requests.post", boom)
    with pytest.raises(EmailTransportError) as exc:
        _send()
    assert "connection refused" in str(exc.value)
