import os

# rate limiting off + dummy config before the app is imported
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("S3_BUCKET", "test-bucket")

import httpx
import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from athlete_intake.aws.s3 import get_s3
from athlete_intake.core.settings import Settings, get_settings
from athlete_intake.main import app

STORAGE_HOST = "https://storage.test"


class FakeS3:
    """Records every call; ``fail`` maps an operation name to the exception it raises."""

    def __init__(self, location=None, fail=None):
        self.calls = []
        self.location = location
        self.fail = fail or {}

    def _maybe_fail(self, op):
        if op in self.fail:
            raise self.fail[op]

    def create_multipart_upload(self, **kwargs):
        self.calls.append(("create_multipart_upload", kwargs))
        self._maybe_fail("create_multipart_upload")
        return {"UploadId": "upload-123", "Key": kwargs["Key"]}

    def generate_presigned_url(self, method, Params, ExpiresIn):
        self.calls.append(("generate_presigned_url", {"method": method, "ExpiresIn": ExpiresIn, **Params}))
        self._maybe_fail("generate_presigned_url")
        return f"{STORAGE_HOST}/{Params['Key']}?partNumber={Params['PartNumber']}&uploadId={Params['UploadId']}"

    def complete_multipart_upload(self, **kwargs):
        self.calls.append(("complete_multipart_upload", kwargs))
        self._maybe_fail("complete_multipart_upload")
        resp = {"Bucket": kwargs["Bucket"], "Key": kwargs["Key"]}
        if self.location:
            resp["Location"] = self.location
        return resp

    def abort_multipart_upload(self, **kwargs):
        self.calls.append(("abort_multipart_upload", kwargs))
        self._maybe_fail("abort_multipart_upload")
        return {}

    def ops(self):
        return [name for name, _ in self.calls]


def make_client_error(code="InvalidPart", status=400, message="One or more of the specified parts could not be found."):
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status, "RequestId": "req-1"},
        },
        "CompleteMultipartUpload",
    )


def make_settings(**overrides) -> Settings:
    values = {
        "S3_BUCKET": "test-bucket",
        "PUBLIC_FILE_BASE_URL": None,
        "RESEND_API_KEY": "re_test_key",
        "FROM_EMAIL": "Athlete Intake <intake@example.com>",
        "OWNER_EMAIL": "owner@example.com",
        "RATE_LIMIT_ENABLED": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def test_settings():
    return make_settings()


@pytest.fixture
def client(fake_s3, test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_s3] = lambda: fake_s3
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class StorageStub:
    """Stands in for the bucket behind the presigned part URLs."""

    def __init__(self, fail_part=None, drop_etag_part=None):
        self.requests = []
        self.fail_part = fail_part
        self.drop_etag_part = drop_etag_part

    def __call__(self, request: httpx.Request) -> httpx.Response:
        part = int(request.url.params["partNumber"])
        self.requests.append((part, len(request.content)))
        if part == self.fail_part:
            return httpx.Response(403, text="<Error><Code>AccessDenied</Code></Error>")
        headers = {} if part == self.drop_etag_part else {"ETag": f'"etag-{part}"'}
        return httpx.Response(200, headers=headers)


@pytest.fixture
def storage_stub():
    return StorageStub()


@pytest.fixture
def storage_client(storage_stub):
    with httpx.Client(transport=httpx.MockTransport(storage_stub)) as c:
        yield c


class FakeResendResponse:
    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture calls to the Resend API; each entry is the decoded JSON payload."""
    import json

    sent = []

    def fake_post(url, headers=None, data=None, timeout=None):
        sent.append({"url": url, "headers": headers, "payload": json.loads(data), "timeout": timeout})
        return FakeResendResponse(200, {"id": f"email-{len(sent)}"})

    monkeypatch.setattr("athlete_intake.services.email.requests.post", fake_post)
    return sent
