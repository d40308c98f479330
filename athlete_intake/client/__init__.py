from .form import FormController, FormState, FormValidationError
from .uploader import (
    FileUpload,
    MediaFile,
    MultipartUploader,
    SubmissionError,
    UploadError,
    UploadState,
)

__all__ = [
    "FileUpload",
    "FormController",
    "FormState",
    "FormValidationError",
    "MediaFile",
    "MultipartUploader",
    "SubmissionError",
    "UploadError",
    "UploadState",
]
