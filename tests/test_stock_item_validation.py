import pytest

from orders.validation import Operation, validate_stock_item

VALID_ATTRS = {"variant_id": 1, "stock_location_id": 2, "count_on_hand": 5}


class TestCreateStockItem:
    def test_valid_attributes(self):
        result = validate_stock_item({}, VALID_ATTRS, Operation.CREATE)
        assert result.valid
        assert result.changes == VALID_ATTRS

    @pytest.mark.parametrize("field", ["variant_id", "stock_location_id", "count_on_hand"])
    def test_required_fields(self, field):
        params = {k: v for k, v in VALID_ATTRS.items() if k != field}
        result = validate_stock_item({}, params, Operation.CREATE)
        assert result.errors == {field: ["cannot be blank"]}

    def test_count_on_hand_cannot_be_negative(self):
        result = validate_stock_item({}, {**VALID_ATTRS, "count_on_hand": -1}, Operation.CREATE)
        assert result.errors == {"count_on_hand": ["must be greater than -1"]}

    def test_zero_count_is_allowed(self):
        result = validate_stock_item({}, {**VALID_ATTRS, "count_on_hand": 0}, Operation.CREATE)
        assert result.valid

    def test_numeric_strings_are_cast(self):
        result = validate_stock_item({}, {**VALID_ATTRS, "count_on_hand": "7"}, Operation.CREATE)
        assert result.changes["count_on_hand"] == 7

    def test_non_numeric_count_is_invalid(self):
        result = validate_stock_item({}, {**VALID_ATTRS, "count_on_hand": "many"}, Operation.CREATE)
        assert result.errors == {"count_on_hand": ["is invalid"]}

    @pytest.mark.parametrize("field,value", [
        ("variant_id", 0),
        ("variant_id", 10 ** 30),
        ("stock_location_id", -4),
        ("count_on_hand", 2 ** 31),
    ])
    def test_out_of_range_numbers_are_invalid(self, field, value):
        result = validate_stock_item({}, {**VALID_ATTRS, field: value}, Operation.CREATE)
        assert result.errors == {field: ["is invalid"]}


class TestUpdateStockItem:
    def test_only_count_is_permitted(self):
        current = {"count_on_hand": 3}
        result = validate_stock_item(current, {"count_on_hand": 4, "variant_id": 9}, "update")
        assert result.valid
        assert result.changes == {"count_on_hand": 4}

    def test_count_falls_back_to_current_state(self):
        result = validate_stock_item({"count_on_hand": 3}, {}, "update")
        assert result.valid

    def test_count_cannot_be_cleared(self):
        result = validate_stock_item({"count_on_hand": 3}, {"count_on_hand": None}, "update")
        assert result.errors == {"count_on_hand": ["cannot be blank"]}

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            validate_stock_item({}, VALID_ATTRS, "delete")
