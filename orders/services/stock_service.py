import logging
from typing import Any, Mapping, Optional, Tuple

from django.db import transaction

from orderflow.logging_filters import correlation_scope

from ..models import StockItem, StockLocation, Variant
from ..structured_logging import audit_logger
from ..validation import Operation, validate_stock_item
from ..validation.changeset import AggregateResult, Rejected
from .persistence import assign_changes, reference_errors

logger = logging.getLogger(__name__)


class StockService:
    REFERENCES = {
        "variant_id": Variant,
        "stock_location_id": StockLocation,
    }
    STORED_FIELDS = ("variant_id", "stock_location_id", "count_on_hand")

    @classmethod
    @transaction.atomic
    def create_stock_item(cls, params: Mapping[str, Any]) -> Tuple[AggregateResult, Optional[StockItem]]:
        with correlation_scope():
            result = cls._validate({}, params, Operation.CREATE)
            if not result.valid:
                audit_logger.audit("stock_item.create", "stock_item", errors=result.errors)
                return result, None

            item = StockItem()
            assign_changes(item, result.changes, cls.STORED_FIELDS)
            item.save()
            audit_logger.audit("stock_item.create", "stock_item", resource_id=item.pk,
                               count_on_hand=item.count_on_hand)
            return result, item

    @classmethod
    @transaction.atomic
    def update_stock_item(cls, item: StockItem, params: Mapping[str, Any]) -> Tuple[AggregateResult, StockItem]:
        with correlation_scope():
            current = {"count_on_hand": item.count_on_hand}
            result = cls._validate(current, params, Operation.UPDATE)
            if not result.valid:
                audit_logger.audit("stock_item.update", "stock_item", resource_id=item.pk, errors=result.errors)
                return result, item

            assign_changes(item, result.changes, ("count_on_hand",))
            item.save(update_fields=["count_on_hand", "updated_at"])
            logger.info(f"Stock item {item.pk} now has {item.count_on_hand} on hand")
            return result, item

    @classmethod
    def _validate(cls, current: Mapping[str, Any], params: Mapping[str, Any], operation: Operation) -> AggregateResult:
        result = validate_stock_item(current, params, operation)
        if not result.valid:
            return result
        errors = reference_errors(result.changes, cls.REFERENCES)
        if errors:
            return Rejected(errors)
        return result
