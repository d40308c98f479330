# athlete_intake/schemas/submission.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email


class SubmissionForm(BaseModel):
    """
    Fields of the athlete intake form, in the order they are shown and mailed.
    Unknown keys are rejected so every value that reaches the email is typed.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )

    phone_number: str = ""
    email: Optional[str] = None
    player_first_name: str = ""
    player_last_name: str = ""
    graduation_year: str = ""
    club_team_name: str = ""
    club_team_colors: str = ""
    club_team_number: str = ""
    club_team_positions: str = ""
    school_team_name: str = ""
    school_team_colors: str = ""
    school_team_number: str = ""
    school_team_positions: str = ""
    honors: str = ""
    video_cut_instructions: str = ""
    video_links: str = ""

    # filled in by the form controller after the uploads finished
    image_url: str = ""
    image_key: str = ""
    image_keys: List[str] = Field(default_factory=list)
    uploaded_video_keys: List[str] = Field(default_factory=list)

    @field_validator("graduation_year", "club_team_number", "school_team_number", mode="before")
    @classmethod
    def _number_as_text(cls, v):
        # <input type="number"> may arrive as a JSON number
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("email", mode="before")
    @classmethod
    def _submitter_email(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if not isinstance(v, str):
            raise ValueError("email must be a string")
        _, address = validate_email(v.strip())
        return address

    @property
    def player_name(self) -> str:
        return " ".join(p for p in (self.player_first_name, self.player_last_name) if p)

    def rows(self) -> List[tuple[str, object]]:
        """(camelCase key, value) pairs for rendering, in declaration order."""
        data = self.model_dump(by_alias=True)
        return [(key, value) for key, value in data.items()]


class SubmissionPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    form: SubmissionForm = Field(default_factory=SubmissionForm)
    video_urls: List[str] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)
    # single-image variant of the form
    image_url: Optional[str] = None

    @model_validator(mode="after")
    def _fold_single_image(self) -> "SubmissionPayload":
        urls = list(self.image_urls)
        if self.image_url:
            urls.insert(0, self.image_url)
        seen = set()
        self.image_urls = [u for u in urls if u and not (u in seen or seen.add(u))]
        self.video_urls = [u for u in self.video_urls if u]
        return self


class SubmissionOut(BaseModel):
    ok: bool = True
    id: Optional[str] = None
