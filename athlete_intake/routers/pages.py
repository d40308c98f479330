# athlete_intake/routers/pages.py
from typing import NamedTuple

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from athlete_intake.templates import render_template

router = APIRouter(tags=["pages"])


class FormField(NamedTuple):
    name: str
    label: str
    input_type: str = "text"
    required: bool = False
    placeholder: str = ""


FORM_FIELDS = [
    FormField("phoneNumber", "Your Phone Number", "tel", placeholder="Enter your phone number"),
    FormField("email", "Your Email", "email", placeholder="Enter your email address"),
    FormField("playerFirstName", "Player's First Name", required=True, placeholder="Enter first name"),
    FormField("playerLastName", "Player's Last Name", required=True, placeholder="Enter last name"),
    FormField("graduationYear", "Graduation Year", "number", placeholder="Enter graduation year"),
    FormField("clubTeamName", "Player's Club Team Name", placeholder="Enter club team name"),
    FormField("clubTeamColors", "Player's Club Team Colors", placeholder="Enter club team colors"),
    FormField("clubTeamNumber", "Player's Club Team Number", placeholder="Enter club team number"),
    FormField("clubTeamPositions", "Player's Club Team Position(s)", placeholder="Enter club team position(s)"),
    FormField("schoolTeamName", "Player's School Team Name", placeholder="Enter school team name"),
    FormField("schoolTeamColors", "Player's School Team Colors", placeholder="Enter school team colors"),
    FormField("schoolTeamNumber", "Player's School Team Number", placeholder="Enter school team number"),
    FormField("schoolTeamPositions", "Player's School Team Position(s)", placeholder="Enter school team position(s)"),
    FormField("honors", "List of Academic and Athletic Honors", "textarea", placeholder="List honors separated by commas or sentences"),
    FormField("videoCutInstructions", "Video Cut Instructions", "textarea", required=True, placeholder="Tell us how the video should be cut"),
    FormField("videoLinks", "Links to Existing Videos", "textarea", placeholder="Paste links to videos hosted elsewhere"),
]


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def intake_form() -> HTMLResponse:
    return HTMLResponse(render_template("intake_form.html", {"fields": FORM_FIELDS}))
