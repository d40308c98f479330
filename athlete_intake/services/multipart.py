# athlete_intake/services/multipart.py
from __future__ import annotations

import math
import time
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from athlete_intake.core.logging_config import logger

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class PartLimitExceeded(ValueError):
    pass


class InvalidPartList(ValueError):
    pass


def part_count(size: int, part_size: int, max_parts: int) -> int:
    count = math.ceil(size / part_size)
    if count > max_parts:
        raise PartLimitExceeded(
            f"File too large: {count} parts of {part_size} bytes exceeds the limit of {max_parts}"
        )
    return count


def build_object_key(filename: str, prefix: str = "uploads/") -> str:
    # filename is kept verbatim; the timestamp + token make the key unique enough
    return f"{prefix}{int(time.time() * 1000)}-{uuid4().hex[:12]}-{filename}"


def start_mpu(s3, bucket: str, key: str, content_type: Optional[str]) -> str:
    resp = s3.create_multipart_upload(
        Bucket=bucket,
        Key=key,
        ContentType=content_type or DEFAULT_CONTENT_TYPE,
    )
    return resp["UploadId"]


def get_part_urls(
    s3, bucket: str, key: str, upload_id: str, count: int, expires_in: int
) -> List[str]:
    urls = []
    for n in range(1, count + 1):
        urls.append(
            s3.generate_presigned_url(
                "upload_part",
                Params={"Bucket": bucket, "Key": key, "UploadId": upload_id, "PartNumber": n},
                ExpiresIn=expires_in,
            )
        )
    return urls


def ordered_parts(parts: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Sort [{ETag, PartNumber}] ascending and check the numbers are exactly 1..n.
    ETags are passed on as the client received them.
    """
    part_list = sorted(
        ({"ETag": p["ETag"], "PartNumber": int(p["PartNumber"])} for p in parts),
        key=lambda x: x["PartNumber"],
    )
    numbers = [p["PartNumber"] for p in part_list]
    if numbers != list(range(1, len(part_list) + 1)):
        raise InvalidPartList(f"Part numbers must be 1..{len(part_list)} without gaps or duplicates, got {numbers}")
    return part_list


def complete_mpu(s3, bucket: str, key: str, upload_id: str, parts: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    return s3.complete_multipart_upload(
        Bucket=bucket,
        Key=key,
        UploadId=upload_id,
        MultipartUpload={"Parts": ordered_parts(parts)},
    )


def abort_mpu(s3, bucket: str, key: str, upload_id: str) -> None:
    s3.abort_multipart_upload(Bucket=bucket, Key=key, UploadId=upload_id)
    logger.info("mpu_aborted", key=key)


def public_url_for(key: str, base: Optional[str] = None, location: Optional[str] = None) -> str:
    """Configured public base wins, then the backend Location, then the bare key."""
    if base:
        return f"{base.rstrip('/')}/{key}"
    return location or key
