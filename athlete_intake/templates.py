from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, select_autoescape

from athlete_intake.web.jinja_filters import register_filters

# Structure:
# athlete_intake/
#   templates.py  (this file)
#   templates/
#     submission_email.html
#     intake_form.html

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
register_filters(_env)


def get_environment() -> Environment:
    return _env


def render_template(name: str, context: Mapping[str, Any]) -> str:
    """
    Render a Jinja2 template to an HTML string.

    Example:
        html = render_template("submission_email.html", {"rows": rows})
    """
    template = _env.get_template(name)
    return template.render(**context)
