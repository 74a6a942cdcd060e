"""Input sanitization and validation for user-supplied strings.

The request schemas call these from pydantic validators. Each validator
returns the cleaned value or raises ``ValueError`` with a message that is
safe to show to the client. A value is rejected, not silently rewritten,
when sanitizing it would change it.
"""

import re

MAX_EMAIL_LENGTH = 254
MAX_GROUP_NAME_LENGTH = 100

TAG_PATTERN = re.compile(r"<[^>]*>")
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f\x7f]")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PERSON_NAME_PATTERN = re.compile(r"^[a-zA-Z\s'-]{1,50}$")


def sanitize_string(value: str) -> str:
    """Strip HTML tags and control characters, then trim whitespace."""
    without_tags = TAG_PATTERN.sub("", value)
    return CONTROL_CHAR_PATTERN.sub("", without_tags).strip()


def normalize_email(value: str) -> str:
    """Trim and lowercase an email address."""
    return value.strip().lower()


def validate_email(value: str) -> str:
    """Normalize and validate an email address.

    Args:
        value: Raw email from the request.

    Returns:
        The normalized email.

    Raises:
        ValueError: If the email is too long, malformed or contains markup.
    """
    email = normalize_email(value)
    if len(email) > MAX_EMAIL_LENGTH:
        raise ValueError(f"Email must be at most {MAX_EMAIL_LENGTH} characters")
    if not EMAIL_PATTERN.fullmatch(email):
        raise ValueError("Invalid email format")
    if sanitize_string(email) != email:
        raise ValueError("Email contains invalid characters")
    return email


def validate_person_name(value: str) -> str:
    """Validate a first or last name.

    Names are 1 to 50 letters, spaces, apostrophes or hyphens.

    Raises:
        ValueError: If the name does not match.
    """
    name = value.strip()
    if not PERSON_NAME_PATTERN.fullmatch(name) or sanitize_string(name) != name:
        raise ValueError(
            "Name must be 1-50 characters of letters, spaces, apostrophes or hyphens"
        )
    return name


def validate_group_name(value: str) -> str:
    """Validate a group name.

    Raises:
        ValueError: If the name is empty, too long or contains markup or
            control characters.
    """
    name = value.strip()
    if not name:
        raise ValueError("Group name cannot be empty")
    if len(name) > MAX_GROUP_NAME_LENGTH:
        raise ValueError(
            f"Group name must be at most {MAX_GROUP_NAME_LENGTH} characters"
        )
    if sanitize_string(name) != name:
        raise ValueError("Group name contains invalid characters")
    return name
