import re
from dataclasses import dataclass
from typing import Any, Mapping

from services.errors import ValidationError

MIN_MESSAGE_LENGTH = 3
REQUIRED_FIELDS = ("name", "email", "type", "message")

MISSING_FIELDS_MESSAGE = "Missing required fields (name, email, type, message)."
MESSAGE_TOO_SHORT_MESSAGE = "Message too short."
INVALID_EMAIL_MESSAGE = "Invalid email address."

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class SuggestionDraft:
    name: str
    email: str
    type: str
    message: str
    impact: str = ""
    extra: str = ""


def clean_field(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def validate_submission(
    payload: Mapping[str, Any] | None, *, strict_email: bool = False
) -> SuggestionDraft:
    """
    Normalize a raw submission into a draft or raise ValidationError.

    Pure: no I/O, no clock, no id. Rules run in order, so a payload that is
    both incomplete and short reports the missing fields.
    """
    payload = payload or {}
    cleaned = {key: clean_field(payload.get(key)) for key in (*REQUIRED_FIELDS, "impact", "extra")}

    if not all(cleaned[key] for key in REQUIRED_FIELDS):
        raise ValidationError(MISSING_FIELDS_MESSAGE)
    if len(cleaned["message"]) < MIN_MESSAGE_LENGTH:
        raise ValidationError(MESSAGE_TOO_SHORT_MESSAGE)
    if strict_email and not _EMAIL_RE.match(cleaned["email"]):
        raise ValidationError(INVALID_EMAIL_MESSAGE)

    return SuggestionDraft(**cleaned)
