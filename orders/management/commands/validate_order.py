"""Management command that validates (and optionally stores) an order from JSON."""
import json
import sys

from django.core.management.base import BaseCommand, CommandError

from orders.models import Order
from orders.services import OrderService
from orders.validation import Operation, format_validation_errors


class Command(BaseCommand):
    help = "Validate an order payload and print the accepted changes or the field errors"

    def add_arguments(self, parser):
        parser.add_argument("payload", help="Path to a JSON file, or - to read standard input")
        parser.add_argument(
            "--operation",
            choices=[op.value for op in Operation],
            default=Operation.CREATE.value,
        )
        parser.add_argument("--order-id", type=int, help="Stored order to update")
        parser.add_argument("--commit", action="store_true", help="Write the order when it is accepted")
        parser.add_argument("--price", action="store_true", help="Fill line totals from variant prices")

    def handle(self, *args, **options):
        params = self._load(options["payload"])
        operation = Operation.parse(options["operation"])

        order = None
        if operation is Operation.UPDATE:
            if options["order_id"] is None:
                raise CommandError("--order-id is required for an update")
            try:
                order = Order.objects.get(pk=options["order_id"])
            except Order.DoesNotExist:
                raise CommandError(f"Order {options['order_id']} does not exist")

        if options["price"] and isinstance(params.get("line_items"), list):
            params["line_items"] = OrderService.price_line_items(params["line_items"])

        if options["commit"]:
            if order is None:
                result, order = OrderService.create_order(params)
            else:
                result, order = OrderService.update_order(order, params)
        else:
            current = OrderService.snapshot(order) if order is not None else {}
            result = OrderService.router.route(current, params, operation)

        if result.valid:
            payload = {"status": "accepted", "changes": result.changes}
            if options["commit"]:
                payload["order_id"] = order.pk
            self.stdout.write(json.dumps(payload, indent=2, default=_encode))
            self.stdout.write(self.style.SUCCESS(f"Order {operation.value} accepted"))
            return

        payload = {
            "status": "rejected",
            "errors": result.errors,
            "fields": [error.to_dict() for error in format_validation_errors(result.errors)],
        }
        self.stdout.write(json.dumps(payload, indent=2))
        raise CommandError(f"Order {operation.value} rejected")

    def _load(self, source):
        try:
            if source == "-":
                data = json.load(sys.stdin)
            else:
                with open(source, encoding="utf-8") as handle:
                    data = json.load(handle)
        except (OSError, ValueError) as e:
            raise CommandError(f"Could not read payload: {e}")
        if not isinstance(data, dict):
            raise CommandError("Payload must be a JSON object")
        return data


def _encode(value):
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return str(value)
