import re

from libris.errors import InvalidIdentifier, ValidationError

# largest value a signed 64-bit INTEGER column can hold
MAX_STORE_INT = 2 ** 63 - 1

_ID_RE = re.compile(r"[1-9][0-9]*")


def parse_id(raw, label="Book") -> int:
    """Store ids are positive integers; anything else is rejected before querying."""
    text = str(raw).strip() if raw is not None else ""
    if not _ID_RE.fullmatch(text) or int(text) > MAX_STORE_INT:
        raise InvalidIdentifier(f"Invalid {label} ID")
    return int(text)


def is_provided(data: dict, key: str) -> bool:
    return key in data and data[key] is not None and data[key] != ""


def parse_count(value, field: str) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")
    if number < 0:
        raise ValidationError(f"{field} must be >= 0")
    if number > MAX_STORE_INT:
        raise ValidationError(f"{field} is too large")
    return number


def parse_page_param(value, field: str, default: int) -> int:
    if value is None or str(value).strip() == "":
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be a positive integer")
    if number < 1:
        raise ValidationError(f"{field} must be a positive integer")
    return number


def clean_text(value):
    if value is None:
        return None
    return str(value).strip()
