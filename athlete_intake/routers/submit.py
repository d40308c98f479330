# athlete_intake/routers/submit.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from athlete_intake.core.logging_config import logger
from athlete_intake.core.rate_limit import limiter
from athlete_intake.core.settings import Settings, get_settings, settings as app_settings
from athlete_intake.observability.metrics import submission_counter
from athlete_intake.schemas.submission import SubmissionOut, SubmissionPayload
from athlete_intake.services.email import (
    EmailConfigError,
    EmailProviderError,
)
from athlete_intake.services.notification import notify_owner

router = APIRouter(tags=["submit"])


@router.post("/submit", response_model=SubmissionOut)
@limiter.limit(app_settings.RATE_LIMIT_SUBMIT)
def submit(
    request: Request,
    payload: SubmissionPayload,
    cfg: Settings = Depends(get_settings),
):
    """
    Mail the finished form plus media links to the owner.

    400: email configuration missing/invalid (body shape errors are handled app-wide)
    502: provider refused the message
    500: provider unreachable or unexpected failure
    """
    try:
        message_id = notify_owner(cfg, payload)
    except EmailConfigError as e:
        submission_counter.labels("config_error").inc()
        logger.warning("submission_config_error", error=str(e))
        return JSONResponse(status_code=400, content={"ok": False, "error": str(e)})
    except EmailProviderError as e:
        submission_counter.labels("provider_error").inc()
        return JSONResponse(
            status_code=502,
            content={"ok": False, "error": str(e), "data": e.data},
        )
    except Exception as e:
        # EmailTransportError and anything unexpected
        submission_counter.labels("transport_error").inc()
        logger.error("submission_failed", error=str(e))
        return JSONResponse(
            status_code=500,
            content={"ok": False, "error": "Failed to send email with Resend.", "details": str(e)},
        )

    submission_counter.labels("success").inc()
    logger.info(
        "submission_sent",
        id=message_id,
        videos=len(payload.video_urls),
        images=len(payload.image_urls),
    )
    return SubmissionOut(ok=True, id=message_id)
