# athlete_intake/schemas/uploads_multipart.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MPUCreateIn(_CamelModel):
    filename: str = Field(min_length=1, max_length=1024)
    content_type: Optional[str] = None
    # client reported, untrusted
    size: int = Field(gt=0)


class MPUCreateOut(_CamelModel):
    upload_id: str
    key: str
    part_size: int
    urls: List[str]


class MPUPart(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    etag: str = Field(alias="ETag", min_length=1)
    part_number: int = Field(alias="PartNumber", ge=1)


class MPUCompleteIn(_CamelModel):
    key: str = Field(min_length=1)
    upload_id: str = Field(min_length=1)
    parts: List[MPUPart] = Field(min_length=1)


class MPUCompleteOut(_CamelModel):
    ok: bool = True
    file_url: str
    key: str


class MPUAbortIn(_CamelModel):
    # presence is checked by the endpoint itself (400 before any storage call)
    key: Optional[str] = None
    upload_id: Optional[str] = None
