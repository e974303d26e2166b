from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cafecito.errors import ValidationFailed
from cafecito.models import PAYMENT_METHODS


# Violation codes (one per kind of field-level problem)
INVALID_REQUEST = "InvalidRequest"
INVALID_PAYMENT_METHOD = "InvalidPaymentMethod"
INVALID_QUANTITY = "InvalidQuantity"
INVALID_REFERENCE = "InvalidReference"

MAX_CANCEL_REASON_LENGTH = 255

# Identifiers and quantities are stored in 32-bit INTEGER columns
MAX_INTEGER_VALUE = 2**31 - 1


@dataclass(frozen=True)
class CartItem:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class SaleRequest:
    """Normalized create-sale request: trimmed, typed, items in cart order."""
    customer_id: int | None
    payment_method: str
    items: tuple[CartItem, ...]


def _violation(field: str, code: str, message: str) -> dict:
    return {"field": field, "code": code, "message": message}


def _is_plain_digits(text: str) -> bool:
    # Length cap keeps int() away from huge strings
    return text.isascii() and text.isdigit() and len(text) <= len(str(MAX_INTEGER_VALUE))


def parse_identifier(value: Any) -> int | None:
    """
    Return the identifier as a positive int, or None when it is not well-formed.

    Accepts ints (not bools) and strings of plain digits, up to MAX_INTEGER_VALUE.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not _is_plain_digits(stripped):
            return None
        parsed = int(stripped)
    else:
        return None
    return parsed if 0 < parsed <= MAX_INTEGER_VALUE else None


def _coerce_quantity(value: Any) -> int | None:
    # Reject bools explicitly (bool is a subclass of int)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        qty = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        qty = int(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not _is_plain_digits(stripped):
            return None
        qty = int(stripped)
    else:
        return None
    return qty if 1 <= qty <= MAX_INTEGER_VALUE else None


def validate_sale_request(payload: Any) -> SaleRequest:
    """
    Validate an incoming cart and return the normalized request.

    Performs no I/O. Every violation is collected before failing, so callers
    always get the complete list rather than the first problem found.

    Raises:
        ValidationFailed: with the list of field-level violations
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationFailed([_violation("body", INVALID_REQUEST, "Invalid JSON payload")])

    violations: list[dict] = []

    # customer_id: optional
    raw_customer_id = payload.get("customer_id")
    customer_id = None
    if raw_customer_id is not None:
        customer_id = parse_identifier(raw_customer_id)
        if customer_id is None:
            violations.append(_violation(
                "customer_id", INVALID_REFERENCE, "customer_id is not a valid identifier",
            ))

    # payment_method: defaults to cash
    raw_method = payload.get("payment_method", "cash")
    payment_method = raw_method.strip() if isinstance(raw_method, str) else raw_method
    if payment_method not in PAYMENT_METHODS:
        violations.append(_violation(
            "payment_method",
            INVALID_PAYMENT_METHOD,
            f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}",
        ))

    raw_items = payload.get("items")
    items: list[CartItem] = []
    if not isinstance(raw_items, list) or not raw_items:
        violations.append(_violation(
            "items", INVALID_REQUEST, "items cannot be empty (minimum 1 item required)",
        ))
    else:
        for idx, raw_item in enumerate(raw_items):
            if not isinstance(raw_item, dict):
                violations.append(_violation(
                    f"items[{idx}]", INVALID_REQUEST, "each item must be an object",
                ))
                continue

            product_id = parse_identifier(raw_item.get("product_id"))
            if product_id is None:
                violations.append(_violation(
                    f"items[{idx}].product_id", INVALID_REFERENCE, "product_id is not a valid identifier",
                ))

            quantity = _coerce_quantity(raw_item.get("quantity"))
            if quantity is None:
                violations.append(_violation(
                    f"items[{idx}].quantity",
                    INVALID_QUANTITY,
                    f"quantity must be an integer between 1 and {MAX_INTEGER_VALUE}",
                ))

            if product_id is not None and quantity is not None:
                items.append(CartItem(product_id=product_id, quantity=quantity))

    if violations:
        raise ValidationFailed(violations)

    return SaleRequest(
        customer_id=customer_id,
        payment_method=payment_method,
        items=tuple(items),
    )


def normalize_cancel_reason(raw: Any) -> str:
    """Trim the cancel reason; missing means empty."""
    reason = "" if raw is None else str(raw).strip()
    if len(reason) > MAX_CANCEL_REASON_LENGTH:
        raise ValidationFailed([_violation(
            "reason", INVALID_REQUEST, f"reason exceeds max length {MAX_CANCEL_REASON_LENGTH}",
        )])
    return reason
