import pytest

from services.errors import ValidationError
from services.validation import (
    INVALID_EMAIL_MESSAGE,
    MESSAGE_TOO_SHORT_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    validate_submission,
)

VALID = {"name": "Ada", "email": "ada@example.com", "type": "bug", "message": "it crashed"}


def test_trims_and_defaults_optional_fields():
    draft = validate_submission({
        "name": "  Ada ",
        "email": " ada@example.com",
        "type": "bug\n",
        "message": "  it crashed  ",
    })
    assert draft.name == "Ada"
    assert draft.email == "ada@example.com"
    assert draft.type == "bug"
    assert draft.message == "it crashed"
    assert draft.impact == ""
    assert draft.extra == ""


@pytest.mark.parametrize("field", ["name", "email", "type", "message"])
def test_missing_required_field(field):
    payload = {k: v for k, v in VALID.items() if k != field}
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(payload)
    assert exc_info.value.message == MISSING_FIELDS_MESSAGE
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("value", ["", "   ", None, 42, ["Ada"], {"first": "Ada"}])
def test_blank_or_non_string_name_counts_as_missing(value):
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({**VALID, "name": value})
    assert exc_info.value.message == MISSING_FIELDS_MESSAGE


def test_none_payload_is_missing_everything():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(None)
    assert exc_info.value.message == MISSING_FIELDS_MESSAGE


@pytest.mark.parametrize("message", ["a", "ab", "  ab  "])
def test_short_message_rejected(message):
    with pytest.raises(ValidationError) as exc_info:
        validate_submission({**VALID, "message": message})
    assert exc_info.value.message == MESSAGE_TOO_SHORT_MESSAGE


def test_three_character_message_accepted():
    assert validate_submission({**VALID, "message": " abc "}).message == "abc"


def test_email_shape_only_checked_when_strict():
    payload = {**VALID, "email": "not-an-email"}
    assert validate_submission(payload).email == "not-an-email"
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(payload, strict_email=True)
    assert exc_info.value.message == INVALID_EMAIL_MESSAGE


def test_strict_email_accepts_basic_shape():
    assert validate_submission(VALID, strict_email=True).email == "ada@example.com"


def test_optional_fields_kept_when_given():
    draft = validate_submission({**VALID, "impact": " high ", "extra": " more "})
    assert draft.impact == "high"
    assert draft.extra == "more"
