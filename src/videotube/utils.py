import uuid
from typing import Any, Optional

from videotube.errors import InvalidArgument


def generate_id() -> str:
    return str(uuid.uuid4())


def normalize_id(value: Any) -> Optional[str]:
    """Return the canonical string form of an ID, or None if it is not one."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return str(value)
    try:
        return str(uuid.UUID(str(value).strip()))
    except (ValueError, AttributeError):
        return None


def parse_id(value: Any, label: str) -> str:
    """Validate an ID coming from the request; fail fast before any store access."""
    resource_id = normalize_id(value)
    if resource_id is None:
        raise InvalidArgument(f"Invalid {label} id.")
    return resource_id


def parse_positive_int(value: Any, label: str) -> int:
    if isinstance(value, bool):
        raise InvalidArgument(f"{label} must be a positive integer.")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidArgument(f"{label} must be a positive integer.")
    if number <= 0:
        raise InvalidArgument(f"{label} must be a positive integer.")
    return number


def is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def escape_like(value: str, escape: str = "\\") -> str:
    """Make ``value`` match literally inside a LIKE pattern."""
    return (
        value.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )
