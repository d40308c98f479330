# athlete_intake/aws/s3.py
import boto3
from botocore.config import Config
from fastapi import Depends

from athlete_intake.core.logging_config import logger
from athlete_intake.core.settings import Settings, get_settings


class StorageNotConfigured(RuntimeError):
    pass


def _boto_config(settings: Settings) -> Config:
    return Config(
        signature_version="s3v4",
        s3={"addressing_style": "path" if settings.S3_FORCE_PATH_STYLE else "auto"},
        # No retries: every storage failure is terminal for the caller
        retries={"max_attempts": 1, "mode": "standard"},
        connect_timeout=settings.S3_CONNECT_TIMEOUT,
        read_timeout=settings.S3_READ_TIMEOUT,
    )


def build_s3_client(settings: Settings):
    """
    boto3 S3 client for AWS or any S3 compatible endpoint (R2, MinIO).
    Without explicit keys boto3 falls back to its default credential chain.
    """
    kwargs = {
        "region_name": settings.S3_REGION,
        "config": _boto_config(settings),
    }
    if settings.S3_ENDPOINT:
        kwargs["endpoint_url"] = settings.S3_ENDPOINT
    if settings.S3_ACCESS_KEY_ID and settings.S3_SECRET_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.S3_ACCESS_KEY_ID
        kwargs["aws_secret_access_key"] = settings.S3_SECRET_ACCESS_KEY

    client = boto3.client("s3", **kwargs)
    logger.info(
        "s3_client_initialized",
        region=settings.S3_REGION,
        endpoint=settings.S3_ENDPOINT,
        bucket=settings.S3_BUCKET,
    )
    return client


_s3_client = None


def get_s3(settings: Settings = Depends(get_settings)):
    """Lazy singleton S3 client for FastAPI DI."""
    global _s3_client
    if _s3_client is None:
        _s3_client = build_s3_client(settings)
    return _s3_client


def require_bucket(settings: Settings) -> str:
    if not settings.S3_BUCKET:
        raise StorageNotConfigured("S3_BUCKET is not configured")
    return settings.S3_BUCKET
