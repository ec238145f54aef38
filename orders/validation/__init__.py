"""
Centralized Validation Module

Turns raw user input into write-ready change sets.

Domains:
- Order: the order aggregate with its line items and totals
- User: account fields and credential hashing
- StockItem: inventory counts
"""

from .errors import (
    APIError,
    CurrencyMismatchError,
    ErrorCode,
    FieldError,
    ValidationError,
    format_validation_errors,
)
from .money import Money
from .changeset import Accepted, AggregateResult, Changeset, Operation, Rejected
from .fields import FieldConstraints, FieldValidator
from .schemas import LineItemSchema, OrderSchema, StockItemSchema, UserSchema
from .children import ChildCollectionValidator
from .totals import TotalsComputer
from .router import AggregateRouter, validate_order, validate_stock_item, validate_user

__all__ = [
    "APIError",
    "Accepted",
    "AggregateResult",
    "AggregateRouter",
    "Changeset",
    "ChildCollectionValidator",
    "CurrencyMismatchError",
    "ErrorCode",
    "FieldConstraints",
    "FieldError",
    "FieldValidator",
    "LineItemSchema",
    "Money",
    "Operation",
    "OrderSchema",
    "Rejected",
    "StockItemSchema",
    "TotalsComputer",
    "UserSchema",
    "ValidationError",
    "format_validation_errors",
    "validate_order",
    "validate_stock_item",
    "validate_user",
]
