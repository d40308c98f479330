import httpx
import pytest

from athlete_intake.client.uploader import (
    MediaFile,
    MultipartUploader,
    UploadError,
    UploadState,
)
from tests.conftest import StorageStub

MiB = 1024 * 1024


def _media(tmp_path, name="clip.mp4", size=25 * MiB):
    path = tmp_path / name
    with path.open("wb") as fh:
        fh.truncate(size)
    return MediaFile.from_path(path)


def test_media_file_from_path(tmp_path):
    media = _media(tmp_path, "jane.jpg", 1234)
    assert media.name == "jane.jpg"
    assert media.content_type == "image/jpeg"
    assert media.size == 1234
    assert len(media.read_range(1000, 2000)) == 234


def test_upload_puts_every_part_and_completes_in_order(client, fake_s3, storage_stub, storage_client, tmp_path):
    progress = []
    record = MultipartUploader(client, storage_client).upload(_media(tmp_path), progress.append)

    assert record.state == UploadState.COMPLETED
    assert storage_stub.requests == [(1, 10 * MiB), (2, 10 * MiB), (3, 5 * MiB)]
    assert progress == pytest.approx([100 / 3, 200 / 3, 100.0])

    _, kwargs = fake_s3.calls[-1]
    assert kwargs["MultipartUpload"]["Parts"] == [
        {"ETag": "etag-1", "PartNumber": 1},
        {"ETag": "etag-2", "PartNumber": 2},
        {"ETag": "etag-3", "PartNumber": 3},
    ]
    assert record.file_url == record.key
    assert record.aborted is False


def test_failed_part_aborts_the_session(client, fake_s3, tmp_path):
    stub = StorageStub(fail_part=2)
    with httpx.Client(transport=httpx.MockTransport(stub)) as storage:
        uploader = MultipartUploader(client, storage)
        with pytest.raises(UploadError, match="Failed to upload part 2"):
            uploader.upload(_media(tmp_path))

    assert [p for p, _ in stub.requests] == [1, 2]
    assert "complete_multipart_upload" not in fake_s3.ops()
    name, kwargs = fake_s3.calls[-1]
    assert name == "abort_multipart_upload"
    assert kwargs["UploadId"] == "upload-123"


def test_missing_etag_is_fatal_and_aborts(client, fake_s3, tmp_path):
    stub = StorageStub(drop_etag_part=1)
    with httpx.Client(transport=httpx.MockTransport(stub)) as storage:
        with pytest.raises(UploadError, match="no ETag"):
            MultipartUploader(client, storage).upload(_media(tmp_path))
    assert fake_s3.ops()[-1] == "abort_multipart_upload"


def test_rejected_create_does_not_abort(client, fake_s3, storage_client, tmp_path):
    too_big = MediaFile(path=tmp_path / "huge.mp4", name="huge.mp4", content_type="video/mp4", size=10_001 * 10 * MiB)
    uploader = MultipartUploader(client, storage_client)
    with pytest.raises(UploadError, match="File too large"):
        uploader.upload(too_big)
    assert fake_s3.calls == []


def test_failed_complete_aborts(client, fake_s3, storage_client, tmp_path):
    fake_s3.fail["complete_multipart_upload"] = RuntimeError("assembly failed")
    with pytest.raises(UploadError, match="assembly failed"):
        MultipartUploader(client, storage_client).upload(_media(tmp_path, size=MiB))
    assert fake_s3.ops()[-1] == "abort_multipart_upload"


def _api_replying(create_body, complete_body=b"{}"):
    calls = []

    def handler(request):
        calls.append(request.url.path)
        if request.url.path.endswith("/create-multipart"):
            return httpx.Response(200, content=create_body)
        if request.url.path.endswith("/complete-multipart"):
            return httpx.Response(200, content=complete_body)
        return httpx.Response(200, json={"ok": True})

    return httpx.Client(base_url="http://intake.test", transport=httpx.MockTransport(handler)), calls


def test_create_reply_without_session_fields_is_an_upload_error(tmp_path):
    api, calls = _api_replying(b'{"unexpected": true}')
    with pytest.raises(UploadError, match="Malformed response from /upload/create-multipart"):
        MultipartUploader(api, httpx.Client(transport=httpx.MockTransport(StorageStub()))).upload(
            _media(tmp_path, size=MiB)
        )
    assert calls == ["/upload/create-multipart"]


def test_unreadable_complete_reply_aborts(tmp_path):
    create = (
        b'{"uploadId": "u-1", "key": "uploads/clip.mp4", "partSize": 10485760,'
        b' "urls": ["http://storage.test/uploads/clip.mp4?partNumber=1&uploadId=u-1"]}'
    )
    api, calls = _api_replying(create, complete_body=b"<html>bad gateway</html>")
    storage = httpx.Client(transport=httpx.MockTransport(StorageStub()))
    with pytest.raises(UploadError, match="Malformed response from /upload/complete-multipart"):
        MultipartUploader(api, storage).upload(_media(tmp_path, size=MiB))
    assert calls[-1] == "/upload/abort-multipart"
