# athlete_intake/client/form.py
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import httpx

from athlete_intake.client.uploader import (
    FileUpload,
    MediaFile,
    MultipartUploader,
    SubmissionError,
)
from athlete_intake.core.logging_config import logger
from athlete_intake.schemas.submission import SubmissionForm

SUBMIT_PATH = "/submit"

# Filled in from the upload results, never typed by the user
UPLOAD_RESULT_FIELDS = ("imageUrl", "imageKey", "imageKeys", "uploadedVideoKeys")

INPUT_FIELDS = tuple(
    f.alias
    for f in SubmissionForm.model_fields.values()
    if f.alias not in UPLOAD_RESULT_FIELDS
)

REQUIRED_FIELDS: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("playerFirstName", "playerLastName"), "Player name is required."),
    (("videoCutInstructions",), "Cut instructions are required."),
)


class FormValidationError(SubmissionError):
    pass


class FormState(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class FormController:
    """
    Holds the intake form values and selected files, uploads every file
    (all images, then all videos, one at a time) and posts the result to /submit.
    """

    def __init__(
        self,
        api: httpx.Client,
        storage: Optional[httpx.Client] = None,
        require_images: bool = True,
        require_videos: bool = True,
    ):
        self.api = api
        self.uploader = MultipartUploader(api, storage)
        self.require_images = require_images
        self.require_videos = require_videos
        self.reset()

    # ------------------------------------------------------------------
    # state
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self.fields: Dict[str, str] = {name: "" for name in INPUT_FIELDS}
        self.images: List[MediaFile] = []
        self.videos: List[MediaFile] = []
        # keyed by index-based ids: image-0, video-1, ...
        self.progress: Dict[str, float] = {}
        self.uploads: Dict[str, FileUpload] = {}
        self.state = FormState.IDLE
        self.message = ""

    def _collecting(self) -> None:
        if self.state in (FormState.IDLE, FormState.SUCCESS, FormState.ERROR):
            self.state = FormState.COLLECTING

    def set_field(self, name: str, value: str) -> None:
        if name not in self.fields:
            raise KeyError(f"unknown form field: {name}")
        self.fields[name] = value
        self._collecting()

    def add_image(self, media: Union[MediaFile, str, Path]) -> None:
        self.images.append(media if isinstance(media, MediaFile) else MediaFile.from_path(media))
        self._reset_progress()
        self._collecting()

    def add_video(self, media: Union[MediaFile, str, Path]) -> None:
        self.videos.append(media if isinstance(media, MediaFile) else MediaFile.from_path(media))
        self._reset_progress()
        self._collecting()

    def _reset_progress(self) -> None:
        self.progress = {f"image-{i}": 0.0 for i in range(len(self.images))}
        self.progress.update({f"video-{i}": 0.0 for i in range(len(self.videos))})

    # ------------------------------------------------------------------
    # validation + submit
    # ------------------------------------------------------------------
    def validate(self) -> Optional[str]:
        """First problem as a user facing message, or None."""
        for names, message in REQUIRED_FIELDS:
            if any(not self.fields.get(n, "").strip() for n in names):
                return message
        if self.require_images and not self.images:
            return "Please upload at least one image."
        if self.require_videos and not self.videos:
            return "Please upload at least one video."
        return None

    def _fail(self, message: str) -> None:
        self.state = FormState.ERROR
        self.message = message

    def _upload_all(self, kind: str, files: List[MediaFile]) -> List[FileUpload]:
        results = []
        for index, media in enumerate(files):
            progress_id = f"{kind}-{index}"

            def on_progress(percent: float, _id: str = progress_id) -> None:
                self.progress[_id] = percent

            record = self.uploader.upload(media, on_progress)
            self.uploads[progress_id] = record
            results.append(record)
        return results

    def build_payload(self, images: List[FileUpload], videos: List[FileUpload]) -> Dict:
        form: Dict[str, object] = {name: value.strip() for name, value in self.fields.items()}
        form.update(
            {
                "imageUrl": images[0].file_url if images else "",
                "imageKey": images[0].key if images else "",
                "imageKeys": [i.key for i in images],
                "uploadedVideoKeys": [v.key for v in videos],
            }
        )
        return {
            "form": form,
            "imageUrls": [i.file_url for i in images],
            "videoUrls": [v.file_url for v in videos],
        }

    def submit(self) -> Optional[str]:
        """
        Validate, upload and notify. Returns the notification id.
        Raises FormValidationError before any network call, UploadError /
        SubmissionError when a step fails; ``state`` and ``message`` follow.
        """
        if self.state == FormState.SUBMITTING:
            raise SubmissionError("A submission is already running.")

        problem = self.validate()
        if problem:
            self._fail(problem)
            raise FormValidationError(problem)

        self.state = FormState.SUBMITTING
        self.message = ""
        try:
            images = self._upload_all("image", self.images)
            videos = self._upload_all("video", self.videos)

            resp = self.api.post(SUBMIT_PATH, json=self.build_payload(images, videos))
            try:
                data = resp.json()
            except ValueError:
                data = {}
            if not isinstance(data, dict):
                data = {}
            if resp.status_code >= 300:
                raise SubmissionError(data.get("error") or "Failed to submit form")
        except SubmissionError as e:
            self._fail(str(e))
            raise
        except httpx.HTTPError as e:
            self._fail(str(e))
            raise SubmissionError(str(e)) from e

        message_id = data.get("id")
        logger.info("submission_completed", id=message_id, images=len(images), videos=len(videos))
        self.reset()
        self.state = FormState.SUCCESS
        self.message = "Submission sent successfully!"
        return message_id
