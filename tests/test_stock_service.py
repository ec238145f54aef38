import pytest

from orders.services import StockService

from tests.factories import StockItemFactory, StockLocationFactory, VariantFactory

pytestmark = pytest.mark.django_db


class TestStockService:
    def test_create(self):
        variant = VariantFactory()
        location = StockLocationFactory()

        result, item = StockService.create_stock_item({
            "variant_id": variant.pk,
            "stock_location_id": location.pk,
            "count_on_hand": "5",
        })

        assert result.valid
        item.refresh_from_db()
        assert item.count_on_hand == 5
        assert item.variant == variant

    def test_create_with_missing_location(self):
        variant = VariantFactory()

        result, item = StockService.create_stock_item({
            "variant_id": variant.pk,
            "stock_location_id": 999999,
            "count_on_hand": 1,
        })

        assert item is None
        assert result.errors == {"stock_location_id": ["does not exist"]}

    def test_oversized_variant_id_is_a_field_error(self):
        location = StockLocationFactory()

        result, item = StockService.create_stock_item({
            "variant_id": 10 ** 30,
            "stock_location_id": location.pk,
            "count_on_hand": 1,
        })

        assert item is None
        assert result.errors == {"variant_id": ["is invalid"]}

    def test_update_count(self):
        item = StockItemFactory(count_on_hand=10)

        result, item = StockService.update_stock_item(item, {"count_on_hand": 0})

        assert result.valid
        item.refresh_from_db()
        assert item.count_on_hand == 0

    def test_negative_count_is_rejected(self):
        item = StockItemFactory(count_on_hand=10)

        result, item = StockService.update_stock_item(item, {"count_on_hand": -1})

        assert result.errors == {"count_on_hand": ["must be greater than -1"]}
        item.refresh_from_db()
        assert item.count_on_hand == 10

