"""
Field-level validation for a single entity.

FieldValidator casts the permitted input keys, then applies the declared
rules in a fixed order:

    cast -> presence -> format -> length -> range -> confirmation

Every rule runs before the changeset is returned, so a caller sees all
field errors of one call at once. Credential fields are hashed only when
the whole changeset is valid.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from orders import conf

from .changeset import Changeset
from .errors import (
    BLANK_MESSAGE,
    CONFIRMATION_MESSAGE,
    FORMAT_MESSAGE,
    GREATER_THAN_MESSAGE,
    INVALID_MESSAGE,
    MIN_LENGTH_MESSAGE,
)
from .money import Money, fits_precision, to_decimal

logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

Hasher = Callable[[str], str]

# IntegerField and BigAutoField ranges
INTEGER_MIN, INTEGER_MAX = -2 ** 31, 2 ** 31 - 1
REFERENCE_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class FieldConstraints:
    type: str = "string"
    min_length: Optional[int] = None
    greater_than: Optional[int] = None
    pattern: Optional[str] = None
    pattern_message: str = FORMAT_MESSAGE
    confirm: bool = False
    hash_into: Optional[str] = None
    max_digits: Optional[int] = None
    decimal_places: Optional[int] = None


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _cast_string(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string, got {type(value).__name__}")
    return value


def _parse_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("booleans are not integers")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        return int(value)
    if isinstance(value, (float, Decimal)):
        try:
            as_int = int(value)
        except (OverflowError, ValueError):
            raise ValueError(f"not an integer: {value!r}")
        if as_int == value:
            return as_int
    raise ValueError(f"not an integer: {value!r}")


def _cast_integer(value: Any) -> int:
    number = _parse_integer(value)
    if not INTEGER_MIN <= number <= INTEGER_MAX:
        raise ValueError(f"integer out of range: {number}")
    return number


def _cast_reference(value: Any) -> int:
    number = _parse_integer(value)
    if not 1 <= number <= REFERENCE_MAX:
        raise ValueError(f"not a row id: {number}")
    return number


def _cast_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "1"):
        return True
    if isinstance(value, str) and value.lower() in ("false", "0"):
        return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"not a boolean: {value!r}")


CASTS: Dict[str, Callable[[Any], Any]] = {
    "string": _cast_string,
    "email": _cast_string,
    "password": _cast_string,
    "integer": _cast_integer,
    "reference": _cast_reference,
    "decimal": to_decimal,
    "money": lambda value: Money.coerce(value, conf.default_currency()),
    "boolean": _cast_boolean,
}


def _check_precision(value: Any, constraints: FieldConstraints) -> None:
    if constraints.max_digits is None or constraints.decimal_places is None:
        return
    amount = value.amount if isinstance(value, Money) else value
    if not fits_precision(amount, constraints.max_digits, constraints.decimal_places):
        raise ValueError(f"{amount} does not fit {constraints.max_digits} digits with {constraints.decimal_places} places")


class FieldValidator:
    """Validates the flat fields of one entity against declared constraints."""

    def __init__(self, constraints: Mapping[str, FieldConstraints]):
        self.constraints = constraints

    def validate(
        self,
        current: Mapping[str, Any],
        raw: Mapping[str, Any],
        required: Sequence[str],
        optional: Sequence[str] = (),
        hasher: Optional[Hasher] = None,
        non_blank: Sequence[str] = (),
    ) -> Changeset:
        """Validate ``raw`` against the current state.

        ``non_blank`` fields are optional, but may not be cleared once supplied.
        """
        permitted = list(dict.fromkeys([*required, *optional]))
        changeset = Changeset(data=current, params=raw)

        changeset = self._cast(changeset, raw, permitted)
        changeset = self._validate_required(
            changeset, [*required, *(name for name in non_blank if name in raw)]
        )
        changeset = self._validate_format(changeset, permitted)
        changeset = self._validate_length(changeset, permitted)
        changeset = self._validate_range(changeset, permitted)
        changeset = self._validate_confirmation(changeset, raw, permitted)
        return self._put_credential_hashes(changeset, permitted, hasher)

    def _constraint(self, name: str) -> FieldConstraints:
        return self.constraints.get(name, FieldConstraints())

    def _cast(self, changeset: Changeset, raw: Mapping[str, Any], permitted: Iterable[str]) -> Changeset:
        for name in permitted:
            if name not in raw:
                continue
            value = raw[name]
            if is_blank(value):
                cast_value = None
            else:
                try:
                    constraints = self._constraint(name)
                    cast_value = CASTS[constraints.type](value)
                    _check_precision(cast_value, constraints)
                except ValueError:
                    changeset = changeset.add_error(name, INVALID_MESSAGE)
                    continue
            if cast_value != changeset.data.get(name):
                changeset = changeset.put_change(name, cast_value)
        return changeset

    def _validate_required(self, changeset: Changeset, required: Iterable[str]) -> Changeset:
        for name in required:
            if name in changeset.errors:
                continue
            if is_blank(changeset.get_field(name)):
                changeset = changeset.add_error(name, BLANK_MESSAGE)
        return changeset

    def _present_changes(self, changeset: Changeset, permitted: Iterable[str]):
        for name in permitted:
            value = changeset.changes.get(name)
            if value is not None:
                yield name, value, self._constraint(name)

    def _validate_format(self, changeset: Changeset, permitted: Iterable[str]) -> Changeset:
        for name, value, constraints in self._present_changes(changeset, permitted):
            pattern = constraints.pattern or (EMAIL_PATTERN if constraints.type == "email" else None)
            if pattern and not re.fullmatch(pattern, value):
                changeset = changeset.add_error(name, constraints.pattern_message)
        return changeset

    def _validate_length(self, changeset: Changeset, permitted: Iterable[str]) -> Changeset:
        for name, value, constraints in self._present_changes(changeset, permitted):
            if constraints.min_length is not None and len(value) < constraints.min_length:
                changeset = changeset.add_error(
                    name, MIN_LENGTH_MESSAGE.format(count=constraints.min_length)
                )
        return changeset

    def _validate_range(self, changeset: Changeset, permitted: Iterable[str]) -> Changeset:
        for name, value, constraints in self._present_changes(changeset, permitted):
            if constraints.greater_than is None:
                continue
            number = value.amount if isinstance(value, Money) else value
            if not number > constraints.greater_than:
                changeset = changeset.add_error(
                    name, GREATER_THAN_MESSAGE.format(number=constraints.greater_than)
                )
        return changeset

    def _validate_confirmation(
        self, changeset: Changeset, raw: Mapping[str, Any], permitted: Iterable[str]
    ) -> Changeset:
        for name, value, constraints in self._present_changes(changeset, permitted):
            if constraints.confirm and raw.get(f"{name}_confirmation") != raw.get(name):
                changeset = changeset.add_error(f"{name}_confirmation", CONFIRMATION_MESSAGE)
        return changeset

    def _put_credential_hashes(
        self, changeset: Changeset, permitted: Iterable[str], hasher: Optional[Hasher]
    ) -> Changeset:
        if not changeset.valid:
            return changeset
        for name, value, constraints in list(self._present_changes(changeset, permitted)):
            if constraints.hash_into is None:
                continue
            hasher = hasher or conf.credential_hasher()
            changeset = changeset.delete_change(name).put_change(constraints.hash_into, hasher(value))
            logger.debug("Derived %s from submitted %s", constraints.hash_into, name)
        return changeset
