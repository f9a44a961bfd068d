import re
from typing import Any, Dict, List, Mapping

from userdb.users.schemas import UserResponse

# Field names in the order their rules are checked
USER_FIELDS = ("username", "email", "phone", "dateOfBirth")

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
PHONE_PATTERN = re.compile(r"\+?[1-9]\d{1,14}", re.ASCII)
DATE_OF_BIRTH_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def _is_text(value: Any) -> bool:
    # An empty string counts as missing
    return isinstance(value, str) and len(value) > 0


def validate_user(candidate: Any) -> List[str]:
    """
    Check a candidate user record against the field rules.

    Every rule is evaluated, in the order username, email, phone, dateOfBirth,
    and each failing rule contributes exactly one message. A candidate that is
    not a mapping (a JSON array, string, number or null) has no fields and so
    fails all four rules.

    Args:
        candidate: Parsed JSON request body.

    Returns:
        list: Error messages, empty when the candidate is valid.
    """
    fields: Mapping[str, Any] = candidate if isinstance(candidate, Mapping) else {}
    errors = []

    username = fields.get("username")
    if not _is_text(username):
        errors.append("username is required and should be at least 1 character long.")

    email = fields.get("email")
    if not _is_text(email) or not EMAIL_PATTERN.search(email):
        errors.append("email is required and should be a valid email address.")

    phone = fields.get("phone")
    if not _is_text(phone) or not PHONE_PATTERN.fullmatch(phone):
        errors.append("phone is required and should be a valid phone number.")

    date_of_birth = fields.get("dateOfBirth")
    if not _is_text(date_of_birth) or not DATE_OF_BIRTH_PATTERN.fullmatch(date_of_birth):
        errors.append("dateOfBirth is required and must be in YYYY-MM-DD format.")

    return errors


def format_user(document: Dict) -> UserResponse:
    """
    Format a stored user document for API response, converting the ObjectId to a string.
    """
    return UserResponse(
        id=str(document["_id"]),
        **{field: document.get(field) for field in USER_FIELDS}
    )
