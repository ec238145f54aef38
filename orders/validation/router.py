"""
Validation entry points.

``AggregateRouter.route`` validates an order with its line items as one
unit: parent fields, then children, then totals. Every call is a pure
evaluation of (current state, raw input) and returns Accepted or Rejected.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from .changeset import AggregateResult, Operation
from .children import ChildCollectionValidator
from .fields import Hasher
from .schemas import OrderSchema, StockItemSchema, UserSchema
from .totals import TotalsComputer

logger = logging.getLogger(__name__)


class AggregateRouter:
    def __init__(
        self,
        children: Optional[ChildCollectionValidator] = None,
        totals: Optional[TotalsComputer] = None,
    ):
        self.children = children or ChildCollectionValidator()
        self.totals = totals or TotalsComputer()

    def route(
        self,
        current: Optional[Mapping[str, Any]],
        raw: Mapping[str, Any],
        operation: Union[Operation, str],
    ) -> AggregateResult:
        operation = Operation.parse(operation)
        current = current or {}

        changeset = OrderSchema.validate(current, raw, operation)
        changeset = self.children.validate(
            changeset,
            raw.get(self.children.field),
            required=OrderSchema.LINE_ITEMS_REQUIRED[operation],
        )
        changeset = self.totals.compute(changeset)

        result = changeset.to_result()
        if not result.valid:
            logger.info("Order %s rejected on %s", operation.value, ", ".join(result.errors))
        return result


def validate_order(
    current: Optional[Mapping[str, Any]],
    raw: Mapping[str, Any],
    operation: Union[Operation, str],
) -> AggregateResult:
    return AggregateRouter().route(current, raw, operation)


def validate_user(
    current: Optional[Mapping[str, Any]],
    raw: Mapping[str, Any],
    operation: Union[Operation, str],
    hasher: Optional[Hasher] = None,
) -> AggregateResult:
    return UserSchema.validate(current or {}, raw, Operation.parse(operation), hasher=hasher).to_result()


def validate_stock_item(
    current: Optional[Mapping[str, Any]],
    raw: Mapping[str, Any],
    operation: Union[Operation, str],
) -> AggregateResult:
    return StockItemSchema.validate(current or {}, raw, Operation.parse(operation)).to_result()
