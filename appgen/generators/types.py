"""Type-mapping table shared by every generator."""
import re
from dataclasses import dataclass
from datetime import date
from typing import Dict, Union


STRING_MAX_LENGTH = 255

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

TRUE_LITERALS = {"true", "1", "yes", "on"}
FALSE_LITERALS = {"false", "0", "no", "off"}


@dataclass(frozen=True)
class TypeMapping:
    """Fixed per-type outputs: storage, binding, validation rule and widget."""
    storage: str  # SQLAlchemy column type expression
    binding: str  # Python type used by ORM attributes and request models
    validation: str  # Rule name applied by the API request models
    widget: str  # UI widget kind
    input_type: str  # HTML input type for the widget


TYPE_MAPPINGS: Dict[str, TypeMapping] = {
    "string": TypeMapping(f"String({STRING_MAX_LENGTH})", "str", "max_length", "text-input", "text"),
    "number": TypeMapping("Integer", "int", "integer", "number-input", "number"),
    "boolean": TypeMapping("Boolean", "bool", "boolean", "checkbox", "checkbox"),
    "date": TypeMapping("Date", "date", "iso_date", "date-picker", "date"),
    "email": TypeMapping(f"String({STRING_MAX_LENGTH})", "str", "email", "email-input", "email"),
    "text": TypeMapping("Text", "str", "none", "textarea", "text"),
}


def get_mapping(field_type: str) -> TypeMapping:
    return TYPE_MAPPINGS[field_type]


def coerce_default(field_type: str, value: str) -> Union[str, int, bool]:
    """
    Coerce a field's ``defaultValue`` to a typed Python value.

    Raises:
        ValueError: if ``value`` is not a valid literal for ``field_type``
    """
    if field_type == "number":
        text = value.strip()
        if not re.fullmatch(r"[+-]?\d+", text):
            raise ValueError(f"{value!r} is not an integer")
        return int(text)
    if field_type == "boolean":
        text = value.strip().lower()
        if text in TRUE_LITERALS:
            return True
        if text in FALSE_LITERALS:
            return False
        raise ValueError(f"{value!r} is not a boolean")
    if field_type == "date":
        text = value.strip()
        if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", text):
            raise ValueError(f"{value!r} is not an ISO-8601 date")
        date.fromisoformat(text)
        return text
    if field_type == "email":
        if not EMAIL_RE.match(value):
            raise ValueError(f"{value!r} is not an email address")
        return value
    if field_type == "string" and len(value) > STRING_MAX_LENGTH:
        raise ValueError(f"default is longer than {STRING_MAX_LENGTH} characters")
    return value
