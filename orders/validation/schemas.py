"""
Domain-Specific Validation Schemas

Centralized field rules per entity, plus the table that maps each operation
to its required and optional field sets.

Each schema provides:
- Field constraints (type, format, length, range, credentials)
- Per-operation field sets (create / update)
- A validate() entry point returning a Changeset
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from orders import conf

from .changeset import Changeset, Operation
from .fields import FieldConstraints, FieldValidator, Hasher
from .money import MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS


MONEY = FieldConstraints(type="money", max_digits=MONEY_MAX_DIGITS, decimal_places=MONEY_DECIMAL_PLACES)


@dataclass(frozen=True)
class FieldSet:
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()
    non_blank: Tuple[str, ...] = ()


class BaseSchema:
    FIELDS: Dict[str, FieldConstraints] = {}
    OPERATIONS: Dict[Operation, FieldSet] = {}

    @classmethod
    def fields(cls) -> Dict[str, FieldConstraints]:
        return cls.FIELDS

    @classmethod
    def field_set(cls, operation: Operation) -> FieldSet:
        operation = Operation.parse(operation)
        try:
            return cls.OPERATIONS[operation]
        except KeyError:
            raise ValueError(f"{cls.__name__} does not support the {operation.value!r} operation")

    @classmethod
    def validate(
        cls,
        current: Mapping[str, Any],
        raw: Mapping[str, Any],
        operation: Operation,
        hasher: Optional[Hasher] = None,
    ) -> Changeset:
        field_set = cls.field_set(operation)
        return FieldValidator(cls.fields()).validate(
            current, raw, field_set.required, field_set.optional,
            hasher=hasher, non_blank=field_set.non_blank,
        )


class UserSchema(BaseSchema):
    NAME_FIELDS = ("first_name", "last_name", "email", "password")

    OPERATIONS = {
        Operation.CREATE: FieldSet(required=NAME_FIELDS),
        Operation.UPDATE: FieldSet(optional=NAME_FIELDS, non_blank=NAME_FIELDS),
    }

    @classmethod
    def fields(cls) -> Dict[str, FieldConstraints]:
        return {
            "first_name": FieldConstraints(),
            "last_name": FieldConstraints(),
            "email": FieldConstraints(type="email"),
            "password": FieldConstraints(
                type="password",
                min_length=conf.password_min_length(),
                confirm=True,
                hash_into="password_hash",
            ),
        }


class StockItemSchema(BaseSchema):
    FIELDS = {
        "variant_id": FieldConstraints(type="reference"),
        "stock_location_id": FieldConstraints(type="reference"),
        "count_on_hand": FieldConstraints(type="integer", greater_than=-1),
    }

    OPERATIONS = {
        Operation.CREATE: FieldSet(required=("variant_id", "stock_location_id", "count_on_hand")),
        Operation.UPDATE: FieldSet(required=("count_on_hand",)),
    }


class LineItemSchema(BaseSchema):
    """Line items are always built fresh; the collection is replaced as a whole."""

    FIELDS = {
        "variant_id": FieldConstraints(type="reference"),
        "quantity": FieldConstraints(type="integer", greater_than=0),
        "unit_price": MONEY,
        "total": MONEY,
    }

    OPERATIONS = {
        Operation.CREATE: FieldSet(
            required=("variant_id", "total"),
            optional=("quantity", "unit_price"),
        ),
    }


class OrderSchema(BaseSchema):
    REFERENCE_FIELDS = ("user_id", "billing_address_id", "shipping_address_id")
    REQUIRED_FIELDS = ("slug", "state") + REFERENCE_FIELDS

    FIELDS = {
        "slug": FieldConstraints(),
        "state": FieldConstraints(),
        "special_instructions": FieldConstraints(),
        "confirmed": FieldConstraints(type="boolean"),
        "user_id": FieldConstraints(type="reference"),
        "billing_address_id": FieldConstraints(type="reference"),
        "shipping_address_id": FieldConstraints(type="reference"),
    }

    OPERATIONS = {
        Operation.CREATE: FieldSet(
            required=REQUIRED_FIELDS,
            optional=("special_instructions",),
        ),
        Operation.UPDATE: FieldSet(
            optional=REQUIRED_FIELDS + ("special_instructions", "confirmed"),
            non_blank=REQUIRED_FIELDS,
        ),
    }

    # line items are mandatory on create only
    LINE_ITEMS_REQUIRED = {
        Operation.CREATE: True,
        Operation.UPDATE: False,
    }
