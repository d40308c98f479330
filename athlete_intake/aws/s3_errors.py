# athlete_intake/aws/s3_errors.py
from typing import Any, Dict, Optional, Tuple

from botocore.exceptions import ClientError


def map_s3_client_error(e: ClientError) -> Tuple[int, Dict[str, Any]]:
    """Translate a botocore ClientError into (http_status, response body)."""
    err = e.response.get("Error", {}) or {}
    meta = e.response.get("ResponseMetadata", {}) or {}

    code: str = err.get("Code", "")
    msg: str = err.get("Message", "") or str(e)
    http_status: int = int(meta.get("HTTPStatusCode", 500) or 500)
    request_id: Optional[str] = meta.get("RequestId")

    status = 502
    hint = None

    if code in {"NoSuchUpload"}:
        status = 404
        hint = "Multipart upload does not exist anymore (completed or aborted)."
    elif code in {"NoSuchBucket"}:
        status = 500
        hint = "Check S3_BUCKET and S3_ENDPOINT."
    elif code in {"AccessDenied", "SignatureDoesNotMatch", "InvalidAccessKeyId"}:
        status = 500
        hint = "Storage credentials rejected; check the S3_* settings."
    elif code in {"InvalidPart", "InvalidPartOrder", "EntityTooSmall"} or http_status == 400:
        status = 400
        hint = "Part list does not match the uploaded parts."
    elif code in {"RequestTimeout", "SlowDown", "Throttling"}:
        status = 503
        hint = "Storage throttled the request; start the upload again."

    body = {
        "ok": False,
        "error": msg,
        "code": code,
        "hint": hint,
        "request_id": request_id,
    }
    return status, body
