# athlete_intake/observability/metrics.py
from fastapi import APIRouter
from starlette.responses import Response

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(tags=["observability"])

mpu_create_counter = Counter(
    "intake_mpu_create_total",
    "Multipart uploads started",
    ["result"],  # success|too_large|error
)

mpu_complete_counter = Counter(
    "intake_mpu_complete_total",
    "Multipart uploads finalized",
    ["result"],  # success|invalid|error
)

mpu_abort_counter = Counter(
    "intake_mpu_abort_total",
    "Multipart uploads aborted",
    ["result"],  # success|missing_params|error
)

submission_counter = Counter(
    "intake_submission_total",
    "Owner notifications",
    ["result"],  # success|config_error|provider_error|transport_error
)

upload_size_hist = Histogram(
    "intake_upload_size_bytes",
    "File sizes of uploads (client reported)",
    buckets=(1e6, 1e7, 5e7, 1e8, 5e8, 1e9, 5e9, 2e10),
)


@router.get("/metrics", include_in_schema=True)
def metrics() -> Response:
    # Prometheus expects text/plain; version=0.0.4
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
