# athlete_intake/client/uploader.py
from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

import httpx

from athlete_intake.core.logging_config import logger

ProgressCallback = Callable[[float], None]

CREATE_PATH = "/upload/create-multipart"
COMPLETE_PATH = "/upload/complete-multipart"
ABORT_PATH = "/upload/abort-multipart"


class SubmissionError(RuntimeError):
    pass


class UploadError(SubmissionError):
    pass


@dataclass
class MediaFile:
    path: Path
    name: str
    content_type: str
    size: int

    @classmethod
    def from_path(cls, path) -> "MediaFile":
        p = Path(path)
        ctype, _ = mimetypes.guess_type(p.name)
        return cls(
            path=p,
            name=p.name,
            content_type=ctype or "application/octet-stream",
            size=p.stat().st_size,
        )

    def read_range(self, start: int, end: int) -> bytes:
        with self.path.open("rb") as fh:
            fh.seek(start)
            return fh.read(max(0, end - start))


class UploadState(str, Enum):
    PENDING = "pending"
    UPLOADING = "uploading"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class FileUpload:
    """Lifecycle of one file: pending -> uploading (part i) -> completed | failed."""

    media: MediaFile
    state: UploadState = UploadState.PENDING
    current_part: int = 0
    total_parts: int = 0
    key: Optional[str] = None
    upload_id: Optional[str] = None
    part_size: int = 0
    urls: List[str] = field(default_factory=list)
    file_url: Optional[str] = None
    error: Optional[str] = None
    aborted: bool = False
    parts: List[Dict[str, object]] = field(default_factory=list)


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        data = resp.json()
    except ValueError:
        return fallback
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return fallback


class MultipartUploader:
    """
    Drives one file through create-multipart, a PUT per presigned part URL
    and complete-multipart. Parts go out strictly one after another.

    ``api`` talks to the intake service (base_url set), ``storage`` performs
    the raw part PUTs against the presigned URLs.
    """

    def __init__(self, api: httpx.Client, storage: Optional[httpx.Client] = None):
        self.api = api
        self.storage = storage or httpx.Client(timeout=httpx.Timeout(300.0, connect=10.0))

    def upload(self, media: MediaFile, on_progress: Optional[ProgressCallback] = None) -> FileUpload:
        record = FileUpload(media=media)
        try:
            self._create(record)
            self._upload_parts(record, on_progress)
            self._complete(record)
        except (UploadError, httpx.HTTPError) as e:
            record.state = UploadState.FAILED
            record.error = str(e)
            logger.warning("upload_failed", file=media.name, part=record.current_part, error=str(e))
            if record.upload_id:
                self._abort(record)
            if isinstance(e, UploadError):
                raise
            raise UploadError(f"Upload of {media.name} failed: {e}") from e

        record.state = UploadState.COMPLETED
        return record

    def _create(self, record: FileUpload) -> None:
        media = record.media
        resp = self.api.post(
            CREATE_PATH,
            json={"filename": media.name, "contentType": media.content_type, "size": media.size},
        )
        if resp.status_code >= 300:
            raise UploadError(_error_message(resp, "Failed to start upload"))
        try:
            data = resp.json()
            record.key = data["key"]
            record.upload_id = data["uploadId"]
            record.part_size = int(data["partSize"])
            record.urls = list(data["urls"])
        except (ValueError, KeyError, TypeError) as e:
            raise UploadError(f"Malformed response from {CREATE_PATH}") from e
        record.total_parts = len(record.urls)

    def _upload_parts(self, record: FileUpload, on_progress: Optional[ProgressCallback]) -> None:
        record.state = UploadState.UPLOADING
        part_size = record.part_size
        for index, url in enumerate(record.urls):
            part_number = index + 1
            record.current_part = part_number
            start = index * part_size
            end = min(start + part_size, record.media.size)

            resp = self.storage.put(url, content=record.media.read_range(start, end))
            if not resp.is_success:
                raise UploadError(f"Failed to upload part {part_number}")

            etag = (resp.headers.get("ETag") or "").replace('"', "")
            if not etag:
                raise UploadError(f"Part {part_number} returned no ETag")

            record.parts.append({"ETag": etag, "PartNumber": part_number})
            if on_progress:
                on_progress(part_number / record.total_parts * 100)

    def _complete(self, record: FileUpload) -> None:
        resp = self.api.post(
            COMPLETE_PATH,
            json={"key": record.key, "uploadId": record.upload_id, "parts": record.parts},
        )
        if resp.status_code >= 300:
            raise UploadError(_error_message(resp, "Failed to finalize upload"))
        try:
            data = resp.json()
            record.file_url = data.get("fileUrl") or record.key
        except (ValueError, AttributeError) as e:
            raise UploadError(f"Malformed response from {COMPLETE_PATH}") from e

    def _abort(self, record: FileUpload) -> None:
        # compensating step; the original failure is what the caller sees
        try:
            resp = self.api.post(ABORT_PATH, json={"key": record.key, "uploadId": record.upload_id})
        except httpx.HTTPError as e:
            logger.error("upload_abort_failed", key=record.key, error=str(e))
            return
        record.aborted = resp.is_success
        if not record.aborted:
            logger.error("upload_abort_failed", key=record.key, status_code=resp.status_code)
