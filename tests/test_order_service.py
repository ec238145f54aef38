from decimal import Decimal

import pytest

from orders.models import LineItem, Order
from orders.services import OrderService
from orders.validation import Money

from tests.factories import AddressFactory, LineItemFactory, OrderFactory, UserFactory, VariantFactory

pytestmark = pytest.mark.django_db


@pytest.fixture
def order_params():
    user = UserFactory()
    billing = AddressFactory()
    shipping = AddressFactory()
    first = VariantFactory(selling_price=Decimal("10.00"))
    second = VariantFactory(selling_price=Decimal("20.00"))
    return {
        "slug": "order-2001",
        "state": "cart",
        "user_id": user.pk,
        "billing_address_id": billing.pk,
        "shipping_address_id": shipping.pk,
        "line_items": [
            {"variant_id": first.pk, "total": {"amount": "10.00", "currency": "USD"}},
            {"variant_id": second.pk, "total": {"amount": "20.00", "currency": "USD"}},
        ],
    }


class TestCreateOrder:
    def test_accepted_order_is_stored_with_totals(self, order_params):
        result, order = OrderService.create_order(order_params)

        assert result.valid
        order.refresh_from_db()
        assert order.slug == "order-2001"
        assert order.item_total == Decimal("30.00")
        assert order.total == Decimal("30.00")
        assert order.currency == "USD"
        assert order.line_items.count() == 2

    def test_rejected_order_is_not_stored(self, order_params):
        del order_params["slug"]
        result, order = OrderService.create_order(order_params)

        assert order is None
        assert result.errors == {"slug": ["cannot be blank"]}
        assert Order.objects.count() == 0

    def test_missing_user_is_reported(self, order_params):
        order_params["user_id"] = 999999
        result, order = OrderService.create_order(order_params)

        assert order is None
        assert result.errors == {"user_id": ["does not exist"]}

    def test_missing_variant_is_reported_by_position(self, order_params):
        order_params["line_items"][1]["variant_id"] = 999999
        result, order = OrderService.create_order(order_params)

        assert order is None
        assert result.errors == {"line_items.1.variant_id": ["does not exist"]}
        assert LineItem.objects.count() == 0

    def test_duplicate_variants_are_rejected(self, order_params):
        order_params["line_items"][1]["variant_id"] = order_params["line_items"][0]["variant_id"]
        result, order = OrderService.create_order(order_params)

        assert order is None
        assert result.errors == {"duplicate_variants": ["line_items must have unique variant_ids"]}


    def test_oversized_references_are_field_errors(self, order_params):
        order_params["user_id"] = 10 ** 30
        order_params["line_items"][0]["variant_id"] = 10 ** 30

        result, order = OrderService.create_order(order_params)

        assert order is None
        assert result.errors == {
            "user_id": ["is invalid"],
            "line_items.0.variant_id": ["is invalid"],
        }

    def test_sub_cent_totals_are_rejected_before_storage(self, order_params):
        for line in order_params["line_items"]:
            line["total"] = "0.00005"

        result, order = OrderService.create_order(order_params)

        assert order is None
        assert result.errors == {
            "line_items.0.total": ["is invalid"],
            "line_items.1.total": ["is invalid"],
        }
        assert LineItem.objects.count() == 0

    def test_stored_item_total_matches_stored_lines(self, order_params):
        order_params["line_items"][0]["total"] = "0.3333"
        order_params["line_items"][1]["total"] = "0.6667"

        _, order = OrderService.create_order(order_params)

        order.refresh_from_db()
        stored = sum(item.total for item in order.line_items.all())
        assert order.item_total == stored == Decimal("1.0000")


class TestUpdateOrder:
    def test_partial_update_keeps_line_items(self):
        order = OrderFactory(item_total=Decimal("10.00"), total=Decimal("10.00"))
        LineItemFactory(order=order, total=Decimal("10.00"))

        result, order = OrderService.update_order(order, {"special_instructions": "Leave at the door"})

        assert result.valid
        order.refresh_from_db()
        assert order.special_instructions == "Leave at the door"
        assert order.line_items.count() == 1
        assert order.total == Decimal("10.00")

    def test_line_items_are_replaced_and_totals_recomputed(self):
        order = OrderFactory()
        LineItemFactory(order=order, total=Decimal("10.00"))
        variant = VariantFactory()

        params = {"line_items": [{"variant_id": variant.pk, "quantity": 3, "total": "7.50"}]}
        result, order = OrderService.update_order(order, params)

        assert result.valid
        order.refresh_from_db()
        items = list(order.line_items.all())
        assert len(items) == 1
        assert items[0].variant_id == variant.pk
        assert items[0].quantity == 3
        assert order.item_total == Decimal("7.50")
        assert order.total == Decimal("7.50")

    def test_clearing_a_required_field_is_rejected(self):
        order = OrderFactory(slug="keep-me")

        result, order = OrderService.update_order(order, {"slug": "  "})

        assert result.errors == {"slug": ["cannot be blank"]}
        order.refresh_from_db()
        assert order.slug == "keep-me"

    def test_missing_address_is_reported(self):
        order = OrderFactory()
        result, _ = OrderService.update_order(order, {"shipping_address_id": 999999})
        assert result.errors == {"shipping_address_id": ["does not exist"]}


class TestSnapshot:
    def test_snapshot_reads_money_and_line_items(self):
        order = OrderFactory(total=Decimal("12.00"), item_total=Decimal("12.00"))
        item = LineItemFactory(order=order, quantity=2, unit_price=Decimal("6.00"), total=Decimal("12.00"))

        state = OrderService.snapshot(order)

        assert state["slug"] == order.slug
        assert state["user_id"] == order.user_id
        assert state["total"] == Money("12.00", "USD")
        assert state["line_items"] == (
            {
                "variant_id": item.variant_id,
                "quantity": 2,
                "unit_price": Money("6.00", "USD"),
                "total": Money("12.00", "USD"),
            },
        )


class TestPriceLineItems:
    def test_totals_come_from_variant_price(self):
        variant = VariantFactory(selling_price=Decimal("2.50"))

        priced = OrderService.price_line_items([{"variant_id": variant.pk, "quantity": "4"}])

        assert priced[0]["unit_price"] == Money("2.50", "USD")
        assert priced[0]["quantity"] == 4
        assert priced[0]["total"] == Money("10.00", "USD")

    def test_supplied_totals_are_left_alone(self):
        variant = VariantFactory()
        items = [{"variant_id": variant.pk, "total": "1.00"}]
        assert OrderService.price_line_items(items) == items

    def test_unreadable_items_pass_through(self):
        items = [{"variant_id": "abc"}, {"variant_id": 999999}]
        priced = OrderService.price_line_items(items)
        assert priced == items
