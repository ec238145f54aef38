import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from django.db import IntegrityError, transaction

from orderflow.logging_filters import correlation_scope

from .. import conf
from ..models import Address, LineItem, Order, User, Variant
from ..structured_logging import audit_logger
from ..validation import AggregateRouter, Money, Operation, OrderSchema, TotalsComputer
from ..validation.changeset import AggregateResult, Rejected
from ..validation.fields import CASTS
from ..validation.errors import DUPLICATE_VARIANTS_KEY, DUPLICATE_VARIANTS_MESSAGE
from .persistence import assign_changes, child_reference_errors, reference_errors

logger = logging.getLogger(__name__)


class OrderService:
    REFERENCES = {
        "user_id": User,
        "billing_address_id": Address,
        "shipping_address_id": Address,
    }

    router = AggregateRouter()

    @staticmethod
    def snapshot(order: Order) -> Dict[str, Any]:
        """Current state of a stored order in the shape the validation core reads."""
        line_items = tuple(
            {
                "variant_id": item.variant_id,
                "quantity": item.quantity,
                "unit_price": Money(item.unit_price, item.currency) if item.unit_price is not None else None,
                "total": Money(item.total, item.currency),
            }
            for item in order.line_items.all()
        )
        state = {name: getattr(order, name) for name in OrderSchema.FIELDS}
        state.update({name: order.money(name) for name in Order.MONEY_FIELDS})
        state["line_items"] = line_items
        return state

    @staticmethod
    def price_line_items(items: List[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """
        Fill in unit prices from the variant and compute line totals.

        Items that already carry a total are left alone. Items whose variant
        or quantity cannot be read are passed through for validation to report.
        """
        variant_ids = []
        for item in items:
            try:
                variant_ids.append(CASTS["reference"](item.get("variant_id")))
            except ValueError:
                continue
        variants = Variant.objects.in_bulk(variant_ids)

        priced = []
        for item in items:
            item = dict(item)
            if item.get("total") is None:
                try:
                    variant = variants.get(CASTS["reference"](item.get("variant_id")))
                    quantity = CASTS["integer"](item.get("quantity", 1))
                except ValueError:
                    priced.append(item)
                    continue
                if item.get("unit_price") is None and variant is not None:
                    item["unit_price"] = variant.selling_price_money
                if item.get("unit_price") is not None:
                    unit_price = Money.coerce(
                        item["unit_price"], variant.currency if variant else conf.default_currency()
                    )
                    item["quantity"] = quantity
                    item["total"] = TotalsComputer.line_total(unit_price, quantity)
            priced.append(item)
        return priced

    @classmethod
    def create_order(cls, params: Mapping[str, Any]) -> Tuple[AggregateResult, Optional[Order]]:
        with correlation_scope():
            result = cls._validate({}, params, Operation.CREATE)
            if not result.valid:
                audit_logger.audit("order.create", "order", errors=result.errors)
                return result, None

            try:
                with transaction.atomic():
                    order = Order()
                    order = cls._write(order, result.changes)
            except IntegrityError as exc:
                return cls._integrity_rejection("order.create", None, result, exc), None

            audit_logger.audit("order.create", "order", resource_id=order.pk, total=str(order.total))
            logger.info(f"Created order {order.pk} with {order.line_items.count()} line items")
            return result, order

    @classmethod
    def update_order(cls, order: Order, params: Mapping[str, Any]) -> Tuple[AggregateResult, Order]:
        with correlation_scope():
            result = cls._validate(cls.snapshot(order), params, Operation.UPDATE)
            if not result.valid:
                audit_logger.audit("order.update", "order", resource_id=order.pk, errors=result.errors)
                return result, order

            try:
                with transaction.atomic():
                    order = cls._write(order, result.changes)
            except IntegrityError as exc:
                order.refresh_from_db()
                return cls._integrity_rejection("order.update", order.pk, result, exc), order

            audit_logger.audit("order.update", "order", resource_id=order.pk, fields=sorted(result.changes))
            return result, order

    @classmethod
    def _validate(cls, current: Mapping[str, Any], params: Mapping[str, Any], operation: Operation) -> AggregateResult:
        result = cls.router.route(current, params, operation)
        if not result.valid:
            return result

        errors = reference_errors(result.changes, cls.REFERENCES)
        errors.update(
            child_reference_errors(result.changes.get("line_items", ()), "variant_id", Variant, "line_items")
        )
        if errors:
            logger.info(f"Order {operation.value} references missing rows: {', '.join(errors)}")
            return Rejected(errors)
        return result

    @staticmethod
    def _write(order: Order, changes: Mapping[str, Any]) -> Order:
        assign_changes(order, changes, OrderSchema.FIELDS)
        assign_changes(order, changes, ("item_total", "total"))
        if "total" in changes:
            order.currency = changes["total"].currency
        order.save()

        if "line_items" in changes:
            order.line_items.all().delete()
            LineItem.objects.bulk_create([
                LineItem(
                    order=order,
                    variant_id=item["variant_id"],
                    quantity=item.get("quantity") or 1,
                    unit_price=item["unit_price"].amount if item.get("unit_price") is not None else None,
                    total=item["total"].amount,
                    currency=item["total"].currency,
                )
                for item in changes["line_items"]
            ])
        return order

    @classmethod
    def _integrity_rejection(cls, action: str, order_id: Optional[int], result: AggregateResult,
                             exc: IntegrityError) -> Rejected:
        """Translate a database constraint failure back into field errors."""
        errors = reference_errors(result.changes, cls.REFERENCES)
        errors.update(
            child_reference_errors(result.changes.get("line_items", ()), "variant_id", Variant, "line_items")
        )
        message = str(exc).lower()
        if not errors and "unique" in message and "lineitem" in message:
            errors = {DUPLICATE_VARIANTS_KEY: [DUPLICATE_VARIANTS_MESSAGE]}
        if not errors:
            raise exc

        audit_logger.error(f"{action} hit a database constraint", exception=exc, resource_id=order_id)
        return Rejected(errors)
