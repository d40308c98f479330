# athlete_intake/routers/uploads.py
from botocore.exceptions import ClientError
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from athlete_intake.aws.s3 import get_s3, require_bucket
from athlete_intake.aws.s3_errors import map_s3_client_error
from athlete_intake.core.logging_config import logger
from athlete_intake.core.rate_limit import limiter
from athlete_intake.core.settings import Settings, get_settings, settings as app_settings
from athlete_intake.observability.metrics import (
    mpu_abort_counter,
    mpu_complete_counter,
    mpu_create_counter,
    upload_size_hist,
)
from athlete_intake.schemas.uploads_multipart import (
    MPUAbortIn,
    MPUCompleteIn,
    MPUCompleteOut,
    MPUCreateIn,
    MPUCreateOut,
)
from athlete_intake.services.multipart import (
    InvalidPartList,
    PartLimitExceeded,
    abort_mpu,
    build_object_key,
    complete_mpu,
    get_part_urls,
    part_count,
    public_url_for,
    start_mpu,
)

router = APIRouter(prefix="/upload", tags=["upload"])


def _storage_failure(e: Exception, step: str) -> JSONResponse:
    """Map a storage exception to a JSON error response (message included)."""
    if isinstance(e, ClientError):
        status, body = map_s3_client_error(e)
    else:
        status, body = 500, {"ok": False, "error": f"{step} failed: {e}"}
    logger.error("storage_failure", step=step, status_code=status, error=str(e))
    return JSONResponse(status_code=status, content=body)


# -----------------------------------------------------------------------------
# CREATE: start multipart upload + one presigned URL per part
# -----------------------------------------------------------------------------
@router.post("/create-multipart", response_model=MPUCreateOut)
@limiter.limit(app_settings.RATE_LIMIT_UPLOAD)
def create_multipart(
    request: Request,
    body: MPUCreateIn,
    cfg: Settings = Depends(get_settings),
    s3=Depends(get_s3),
):
    part_size = cfg.part_size_bytes
    try:
        count = part_count(body.size, part_size, cfg.MPU_MAX_PARTS)
    except PartLimitExceeded as e:
        mpu_create_counter.labels("too_large").inc()
        logger.info("mpu_rejected", size=body.size, reason=str(e))
        return JSONResponse(status_code=400, content={"ok": False, "error": "File too large"})

    key = build_object_key(body.filename, cfg.UPLOAD_KEY_PREFIX)
    try:
        bucket = require_bucket(cfg)
        upload_id = start_mpu(s3, bucket, key, body.content_type)
        # no cleanup when presigning fails halfway; the session is left to the bucket lifecycle
        urls = get_part_urls(s3, bucket, key, upload_id, count, cfg.PRESIGN_EXPIRY_SEC)
    except Exception as e:
        mpu_create_counter.labels("error").inc()
        return _storage_failure(e, "create-multipart")

    mpu_create_counter.labels("success").inc()
    upload_size_hist.observe(body.size)
    logger.info("mpu_created", key=key, parts=count, size=body.size)
    return MPUCreateOut(upload_id=upload_id, key=key, part_size=part_size, urls=urls)


# -----------------------------------------------------------------------------
# COMPLETE: assemble parts (ascending PartNumber) + resolve public URL
# -----------------------------------------------------------------------------
@router.post("/complete-multipart", response_model=MPUCompleteOut)
@limiter.limit(app_settings.RATE_LIMIT_UPLOAD)
def complete_multipart(
    request: Request,
    body: MPUCompleteIn,
    cfg: Settings = Depends(get_settings),
    s3=Depends(get_s3),
):
    parts = [{"ETag": p.etag, "PartNumber": p.part_number} for p in body.parts]
    try:
        bucket = require_bucket(cfg)
        completed = complete_mpu(s3, bucket, body.key, body.upload_id, parts)
    except InvalidPartList as e:
        mpu_complete_counter.labels("invalid").inc()
        return JSONResponse(status_code=400, content={"ok": False, "error": str(e)})
    except Exception as e:
        mpu_complete_counter.labels("error").inc()
        return _storage_failure(e, "complete-multipart")

    file_url = public_url_for(body.key, cfg.PUBLIC_FILE_BASE_URL, (completed or {}).get("Location"))
    mpu_complete_counter.labels("success").inc()
    logger.info("mpu_completed", key=body.key, parts=len(parts))
    return MPUCompleteOut(file_url=file_url, key=body.key)


# -----------------------------------------------------------------------------
# ABORT: discard an in-progress upload
# -----------------------------------------------------------------------------
@router.post("/abort-multipart")
@limiter.limit(app_settings.RATE_LIMIT_UPLOAD)
def abort_multipart(
    request: Request,
    body: MPUAbortIn,
    cfg: Settings = Depends(get_settings),
    s3=Depends(get_s3),
):
    if not body.key or not body.upload_id:
        mpu_abort_counter.labels("missing_params").inc()
        return JSONResponse(
            status_code=400,
            content={
                "ok": False,
                "error": "Both key and uploadId are required to abort a multipart upload.",
            },
        )

    try:
        bucket = require_bucket(cfg)
        abort_mpu(s3, bucket, body.key, body.upload_id)
    except Exception as e:
        mpu_abort_counter.labels("error").inc()
        logger.error("mpu_abort_failed", key=body.key, error=str(e))
        return JSONResponse(status_code=500, content={"ok": False, "error": str(e) or "Failed to abort multipart upload."})

    mpu_abort_counter.labels("success").inc()
    return {"ok": True}
