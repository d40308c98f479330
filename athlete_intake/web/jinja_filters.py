import json
import re

from jinja2 import Environment

_CAMEL_BOUNDARY = re.compile(r"([A-Z])")


def format_label(key: str) -> str:
    # playerFirstName -> Player First Name, club_team -> Club Team
    spaced = _CAMEL_BOUNDARY.sub(r" \1", key).replace("_", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced).strip()


def format_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, indent=2)
    return str(value)


def register_filters(env: Environment) -> None:
    env.filters["label"] = format_label
    env.filters["field_value"] = format_value
