# athlete_intake/services/addresses.py
from typing import NamedTuple, Optional

from pydantic_core import PydanticCustomError
from pydantic.networks import validate_email


class InvalidAddress(ValueError):
    pass


class Address(NamedTuple):
    name: Optional[str]
    email: str

    def formatted(self) -> str:
        return f"{self.name} <{self.email}>" if self.name else self.email


def parse_address(value: Optional[str]) -> Address:
    """
    Accepts "ops@example.com" and "Ops Team <ops@example.com>".
    Raises InvalidAddress for anything else.
    """
    raw = (value or "").strip()
    if not raw:
        raise InvalidAddress("empty address")
    try:
        name, email = validate_email(raw)
    except PydanticCustomError as e:
        raise InvalidAddress(f"{raw!r} is not a valid address: {e}") from e

    # validate_email falls back to the local part when no display name is given
    has_display_name = "<" in raw
    return Address(name=name if has_display_name else None, email=email)
