# Overview: Pytest coverage for create-sale request validation and normalization.

import pytest

from cafecito.errors import ValidationFailed
from cafecito.validation import (
    MAX_INTEGER_VALUE,
    INVALID_PAYMENT_METHOD,
    INVALID_QUANTITY,
    INVALID_REFERENCE,
    INVALID_REQUEST,
    CartItem,
    normalize_cancel_reason,
    validate_sale_request,
)


def _codes(exc_info) -> dict:
    return {v["field"]: v["code"] for v in exc_info.value.violations}


class TestValidRequests:
    def test_normalizes_and_types(self):
        request = validate_sale_request({
            "customer_id": "7",
            "payment_method": " card ",
            "items": [{"product_id": "3", "quantity": "2"}, {"product_id": 4, "quantity": 1}],
        })

        assert request.customer_id == 7
        assert request.payment_method == "card"
        assert request.items == (CartItem(3, 2), CartItem(4, 1))

    def test_defaults(self):
        request = validate_sale_request({"items": [{"product_id": 1, "quantity": 1}]})

        assert request.customer_id is None
        assert request.payment_method == "cash"

    def test_integral_float_quantity_accepted(self):
        request = validate_sale_request({"items": [{"product_id": 1, "quantity": 3.0}]})
        assert request.items[0].quantity == 3

    def test_keeps_cart_order_and_duplicates(self):
        request = validate_sale_request({
            "items": [
                {"product_id": 2, "quantity": 1},
                {"product_id": 1, "quantity": 1},
                {"product_id": 2, "quantity": 4},
            ],
        })
        assert [i.product_id for i in request.items] == [2, 1, 2]


class TestViolations:
    @pytest.mark.parametrize("items", [None, [], "abc", {}])
    def test_empty_or_missing_items(self, items):
        payload = {"payment_method": "cash"}
        if items is not None:
            payload["items"] = items
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request(payload)
        assert _codes(exc_info) == {"items": INVALID_REQUEST}

    @pytest.mark.parametrize("method", ["bitcoin", "", "CASH", None, 3])
    def test_payment_method(self, method):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request({"payment_method": method, "items": [{"product_id": 1, "quantity": 1}]})
        assert _codes(exc_info) == {"payment_method": INVALID_PAYMENT_METHOD}

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2.5", "abc", None, True, [1]])
    def test_quantity(self, quantity):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request({"items": [{"product_id": 1, "quantity": quantity}]})
        assert _codes(exc_info) == {"items[0].quantity": INVALID_QUANTITY}

    @pytest.mark.parametrize("product_id", [None, 0, -3, "abc", "12a", 1.0, False, ""])
    def test_product_reference(self, product_id):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request({"items": [{"product_id": product_id, "quantity": 1}]})
        assert _codes(exc_info) == {"items[0].product_id": INVALID_REFERENCE}

    @pytest.mark.parametrize("customer_id", [0, "x", -1, True, {}])
    def test_customer_reference(self, customer_id):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request({"customer_id": customer_id, "items": [{"product_id": 1, "quantity": 1}]})
        assert _codes(exc_info) == {"customer_id": INVALID_REFERENCE}

    def test_item_must_be_object(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request({"items": [5]})
        assert _codes(exc_info) == {"items[0]": INVALID_REQUEST}

    def test_collects_every_violation(self):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request({
                "customer_id": "nope",
                "payment_method": "cheque",
                "items": [
                    {"product_id": 1, "quantity": 1},
                    {"product_id": "bad", "quantity": 0},
                ],
            })

        assert _codes(exc_info) == {
            "customer_id": INVALID_REFERENCE,
            "payment_method": INVALID_PAYMENT_METHOD,
            "items[1].product_id": INVALID_REFERENCE,
            "items[1].quantity": INVALID_QUANTITY,
        }
        assert exc_info.value.status_code == 422

    @pytest.mark.parametrize("payload", [[1, 2], "items", 42])
    def test_non_object_payload(self, payload):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request(payload)
        assert _codes(exc_info) == {"body": INVALID_REQUEST}


class TestIntegerBounds:
    def test_largest_values_accepted(self):
        request = validate_sale_request({
            "customer_id": MAX_INTEGER_VALUE,
            "items": [{"product_id": str(MAX_INTEGER_VALUE), "quantity": MAX_INTEGER_VALUE}],
        })

        assert request.customer_id == MAX_INTEGER_VALUE
        assert request.items[0].quantity == MAX_INTEGER_VALUE

    @pytest.mark.parametrize("quantity", [MAX_INTEGER_VALUE + 1, 10**20, 1e300, "9" * 30, "9" * 5000])
    def test_quantity_out_of_range(self, quantity):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request({"items": [{"product_id": 1, "quantity": quantity}]})
        assert _codes(exc_info) == {"items[0].quantity": INVALID_QUANTITY}

    @pytest.mark.parametrize("identifier", [MAX_INTEGER_VALUE + 1, 10**20, "9" * 30])
    def test_identifiers_out_of_range(self, identifier):
        with pytest.raises(ValidationFailed) as exc_info:
            validate_sale_request({
                "customer_id": identifier,
                "items": [{"product_id": identifier, "quantity": 1}],
            })
        assert _codes(exc_info) == {
            "customer_id": INVALID_REFERENCE,
            "items[0].product_id": INVALID_REFERENCE,
        }


class TestCancelReason:
    def test_trims(self):
        assert normalize_cancel_reason("  wrong order \n") == "wrong order"

    def test_missing_is_empty(self):
        assert normalize_cancel_reason(None) == ""

    def test_too_long(self):
        with pytest.raises(ValidationFailed):
            normalize_cancel_reason("x" * 256)
