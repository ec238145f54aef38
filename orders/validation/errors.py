"""
Validation errors, error codes and the exceptions raised by the core.

Validation errors travel as values: a mapping of field name to an ordered
list of human-readable messages. The message strings below are a
compatibility surface shared with callers, so they are defined once here.

Only two conditions are raised as exceptions:
- CurrencyMismatchError: money arithmetic across currencies (internal error)
- ValidationError: raised on request by callers that prefer exceptions
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

BLANK_MESSAGE = "cannot be blank"
INVALID_MESSAGE = "is invalid"
FORMAT_MESSAGE = "has invalid format"
MIN_LENGTH_MESSAGE = "should be at least {count} character(s)"
GREATER_THAN_MESSAGE = "must be greater than {number}"
CONFIRMATION_MESSAGE = "does not match confirmation"
DUPLICATE_VARIANTS_MESSAGE = "line_items must have unique variant_ids"
DOES_NOT_EXIST_MESSAGE = "does not exist"

DUPLICATE_VARIANTS_KEY = "duplicate_variants"


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FIELD_REQUIRED = "FIELD_REQUIRED"
    FIELD_INVALID = "FIELD_INVALID"
    FIELD_TOO_SHORT = "FIELD_TOO_SHORT"
    FIELD_OUT_OF_RANGE = "FIELD_OUT_OF_RANGE"
    FIELD_INVALID_FORMAT = "FIELD_INVALID_FORMAT"
    CONFIRMATION_MISMATCH = "CONFIRMATION_MISMATCH"

    DUPLICATE_CHILD_KEY = "DUPLICATE_CHILD_KEY"
    FOREIGN_KEY_VIOLATION = "FOREIGN_KEY_VIOLATION"

    CURRENCY_MISMATCH = "CURRENCY_MISMATCH"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass
class FieldError:
    field: str
    code: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "field": self.field,
            "code": self.code,
            "message": self.message,
        }


class APIError(Exception):
    def __init__(
        self,
        code: Union[ErrorCode, str],
        message: str,
        fields: Optional[List[FieldError]] = None,
    ):
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.message = message
        self.fields = fields
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.fields:
            result["fields"] = [f.to_dict() for f in self.fields]
        return result


class ValidationError(APIError):
    def __init__(
        self,
        message: str = "Validation failed",
        fields: Optional[List[FieldError]] = None,
    ):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            fields=fields,
        )


class CurrencyMismatchError(APIError):
    """Money arithmetic was attempted across two currencies.

    Signals corrupt data upstream; it is never reported as a field error.
    """

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(
            code=ErrorCode.CURRENCY_MISMATCH,
            message=f"Cannot add {right} to {left}",
        )


# first matching fragment wins
MESSAGE_CODES = (
    ("blank", ErrorCode.FIELD_REQUIRED),
    ("confirmation", ErrorCode.CONFIRMATION_MISMATCH),
    ("does not exist", ErrorCode.FOREIGN_KEY_VIOLATION),
    ("at least", ErrorCode.FIELD_TOO_SHORT),
    ("greater than", ErrorCode.FIELD_OUT_OF_RANGE),
    ("format", ErrorCode.FIELD_INVALID_FORMAT),
)


def format_validation_errors(
    errors: Mapping[str, Any],
    prefix: str = "",
) -> List[FieldError]:
    """Flatten an error map into coded field errors, one per message.

    Nested maps are joined with dots, so ``{"line_items": {"0": {...}}}``
    yields ``line_items.0.<field>``.
    """
    flattened: List[FieldError] = []

    for name, messages in errors.items():
        key = f"{prefix}{name}"
        if isinstance(messages, Mapping):
            flattened += format_validation_errors(messages, prefix=f"{key}.")
            continue
        if isinstance(messages, str) or not isinstance(messages, (list, tuple)):
            messages = [messages]
        flattened += [FieldError(key, error_code_for(key, str(text)), str(text)) for text in messages]

    return flattened


def error_code_for(field_name: str, message: str) -> str:
    if field_name == DUPLICATE_VARIANTS_KEY:
        return ErrorCode.DUPLICATE_CHILD_KEY.value
    lowered = message.lower()
    for fragment, code in MESSAGE_CODES:
        if fragment in lowered:
            return code.value
    return ErrorCode.FIELD_INVALID.value
