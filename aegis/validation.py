"""
Input validation for the AEGIS compliance service.

Validates and normalizes untrusted submission payloads before they reach
the signer and the record store. Every check raises on the first violated
constraint; nothing here has side effects.
"""

import math
from typing import Any, Dict

# Fields a lab may supply, in checking order
INPUT_FIELDS = ("labName", "modelName", "compute", "cbrnSafeguards")

# Fields only the server assigns; dropped from inbound payloads
SERVER_FIELDS = ("id", "signature", "createdAt")

MAX_NAME_LENGTH = 256

_TRUE_STRINGS = ("true", "1", "yes")
_FALSE_STRINGS = ("false", "0", "no")


class ValidationError(Exception):
    """Raised when input validation fails."""
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


def validate_name(value: Any, field_name: str, max_length: int = MAX_NAME_LENGTH) -> str:
    """
    Validate a required, non-empty name string.

    Returns:
        The name with surrounding whitespace removed

    Raises:
        ValidationError: If validation fails
    """
    if value is None:
        raise ValidationError(field_name, "is required")

    if not isinstance(value, str):
        raise ValidationError(field_name, "must be a string")

    value = value.strip()

    if not value:
        raise ValidationError(field_name, "cannot be empty")

    if len(value) > max_length:
        raise ValidationError(field_name, f"must not exceed {max_length} characters")

    return value


def validate_finite_number(value: Any, field_name: str) -> float:
    """
    Validate that a value parses as a finite number.

    Accepts ints, floats and numeric strings ("5e24"). Booleans are rejected
    even though Python treats them as ints.

    Raises:
        ValidationError: If validation fails
    """
    if value is None:
        raise ValidationError(field_name, "is required")

    if isinstance(value, bool):
        raise ValidationError(field_name, "must be a number")

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(field_name, "must be a number")

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(field_name, "must be a number")

    if not math.isfinite(number):
        raise ValidationError(field_name, "must be a finite number")

    return number


def validate_boolean(value: Any, field_name: str, default: bool = False) -> bool:
    """
    Validate that a value parses as a boolean.

    A missing value takes the default. Accepts real booleans, the integers
    0 and 1, and the strings true/false/1/0/yes/no in any case.

    Raises:
        ValidationError: If validation fails
    """
    if value is None:
        return default

    if isinstance(value, bool):
        return value

    if isinstance(value, int) and value in (0, 1):
        return bool(value)

    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False

    raise ValidationError(field_name, "must be a boolean")


def validate_submission(payload: Any) -> Dict[str, Any]:
    """
    Validate an inbound lab submission.

    Server-assigned fields (id, signature, createdAt) and unknown keys are
    dropped. The result holds exactly the lab-supplied fields, normalized.

    Raises:
        ValidationError: On the first violated constraint
    """
    if not isinstance(payload, dict):
        raise ValidationError("body", "must be an object")

    return {
        "labName": validate_name(payload.get("labName"), "labName"),
        "modelName": validate_name(payload.get("modelName"), "modelName"),
        "compute": validate_finite_number(payload.get("compute"), "compute"),
        "cbrnSafeguards": validate_boolean(payload.get("cbrnSafeguards"), "cbrnSafeguards"),
    }


def validate_submission_id(value: Any, field_name: str = "submissionId") -> int:
    """
    Validate a submission id reference.

    Integral floats (1.0) and numeric strings ("1", "1.0") are accepted,
    booleans, fractional numbers and non-numeric strings are not.

    Raises:
        ValidationError: If validation fails
    """
    if value is None:
        raise ValidationError(field_name, "is required")

    if isinstance(value, bool):
        raise ValidationError(field_name, "must be an integer")

    if isinstance(value, int):
        return value

    if isinstance(value, float) and value.is_integer():
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(field_name, "must be an integer")
        if math.isfinite(number) and number.is_integer():
            return int(number)

    raise ValidationError(field_name, "must be an integer")
