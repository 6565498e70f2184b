"""
UYNM Backend — Validation Layer
=================================

What:  Declarative field rules for request bodies and the conversion of rule
       violations into the API's field-error list.
How:   Each rule factory returns a pydantic `BeforeValidator` carrying its own
       client-facing message. Request schemas attach rules with `Annotated`:

           class ContactCreate(RequestModel):
               first_name: Annotated[str, required_text("First name is required")] = None

       RequestModel validates defaults, so an absent field runs through its
       rule and reports the rule's message instead of a generic "Field
       required". Pydantic evaluates every field before raising, which gives
       the batching guarantee: all violations of one request are reported
       together, in declaration order.
Who:   Rules are used by uynm_api.schemas.*; `field_errors()` is used by the
       RequestValidationError handler in main.py.

Error descriptor shape:
    {"field": "firstName", "message": "First name is required", "location": "body"}
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class RequestModel(BaseModel):
    """
    Base class for every request body.

    - camelCase keys on the wire (firstName, involvementTrack, eventDate)
    - snake_case attributes in Python
    - defaults are validated, so missing fields hit their rule
    - unknown keys are ignored (the website posts extra form fields)
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="ignore",
    )


def _reject(rule: str, message: str):
    raise PydanticCustomError(rule, message)


# ══════════════════════════════════════════════════════════════════════════
# Rule factories
# ══════════════════════════════════════════════════════════════════════════

def required_text(message: str) -> BeforeValidator:
    """Non-empty string after trimming. The trimmed value is what gets stored."""

    def check(value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            _reject("required_text", message)
        return value.strip()

    return BeforeValidator(check)


def present(message: str) -> BeforeValidator:
    """Non-empty string, not trimmed (passwords)."""

    def check(value: Any) -> str:
        if not isinstance(value, str) or value == "":
            _reject("required", message)
        return value

    return BeforeValidator(check)


def min_length_text(length: int, message: str) -> BeforeValidator:
    """Trimmed string of at least `length` characters."""

    def check(value: Any) -> str:
        if not isinstance(value, str) or len(value.strip()) < length:
            _reject("min_length", message)
        return value.strip()

    return BeforeValidator(check)


def min_length(length: int, message: str) -> BeforeValidator:
    """Untrimmed string of at least `length` characters."""

    def check(value: Any) -> str:
        if not isinstance(value, str) or len(value) < length:
            _reject("min_length", message)
        return value

    return BeforeValidator(check)


def email_address(message: str = "Valid email is required") -> BeforeValidator:
    """
    Syntactically valid email address.

    Uses email-validator without the DNS deliverability lookup; the returned
    value is the library's normalized form (domain lowercased).
    """

    def check(value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            _reject("email", message)
        try:
            return validate_email(value.strip(), check_deliverability=False).normalized
        except EmailNotValidError:
            _reject("email", message)

    return BeforeValidator(check)


def one_of(choices: Sequence[str], message: str) -> BeforeValidator:
    """Enumeration membership (exact match)."""
    allowed = tuple(choices)

    def check(value: Any) -> str:
        if value not in allowed:
            _reject("one_of", message)
        return value

    return BeforeValidator(check)


def iso_datetime(message: str = "Valid date is required") -> BeforeValidator:
    """
    ISO-8601 date or date-time, returned as an aware UTC datetime.

    Naive values are taken as UTC. A trailing "Z" is accepted.
    """

    def check(value: Any) -> datetime:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str) and value.strip():
            text = value.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                _reject("iso_datetime", message)
        else:
            _reject("iso_datetime", message)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    return BeforeValidator(check)


def optional_text() -> BeforeValidator:
    """Optional free text: trimmed, and blank becomes None."""

    def check(value: Any) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, str):
            value = str(value)
        value = value.strip()
        return value or None

    return BeforeValidator(check)


# ══════════════════════════════════════════════════════════════════════════
# Error shaping
# ══════════════════════════════════════════════════════════════════════════

_LOCATIONS = {"body", "query", "path", "header", "cookie"}

# Messages for errors raised by pydantic/FastAPI themselves rather than a rule
_BUILTIN_MESSAGES = {
    "json_invalid": "Request body must be valid JSON",
    "uuid_parsing": "Invalid id",
    "uuid_type": "Invalid id",
    "bool_parsing": "Must be true or false",
}


def _wire_name(part: Any) -> str:
    # Missing fields are reported under the attribute name, not the alias
    part = str(part)
    return to_camel(part) if "_" in part else part


def field_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Convert pydantic / FastAPI error dicts into the API's field-error list.

    Order is preserved. Errors whose location is the whole body (body missing
    or not an object) are reported on the pseudo-field "body".
    """
    result: List[Dict[str, Any]] = []
    for error in errors:
        loc = tuple(error.get("loc") or ())
        location = "body"
        if loc and loc[0] in _LOCATIONS:
            location, loc = loc[0], loc[1:]
        error_type = error.get("type", "")

        if error_type == "json_invalid":
            field = "body"
        elif location == "path":
            # Every path parameter is a resource identifier
            field = "id"
        else:
            field = ".".join(_wire_name(part) for part in loc if not isinstance(part, int)) or "body"

        if error_type in _BUILTIN_MESSAGES:
            message = _BUILTIN_MESSAGES[error_type]
        elif field == "body" and location == "body":
            message = "Request body must be a JSON object"
        else:
            message = error.get("msg", "Invalid value")

        result.append({"field": field, "message": message, "location": location})
    return result
