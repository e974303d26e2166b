# Overview: Sale engine error taxonomy; each error knows its HTTP status and public label.

from __future__ import annotations


class SaleError(Exception):
    """Raised for sale operation errors."""
    status_code = 400
    public_error = "Sale error"

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details if details is not None else {}

    def to_dict(self) -> dict:
        payload = {"error": self.public_error, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationFailed(SaleError):
    """
    422-level input problem. Nothing was touched.

    details is the full list of field-level violations:
    [{"field": ..., "code": ..., "message": ...}, ...]
    """
    status_code = 422
    public_error = "Validation failed"

    def __init__(self, violations: list[dict]):
        super().__init__("Validation failed", details=list(violations))

    @property
    def violations(self) -> list[dict]:
        return self.details


class ReferenceNotFound(SaleError):
    """A referenced product or customer does not exist (or is inactive)."""
    status_code = 404

    def __init__(self, kind: str, reference_id, message: str | None = None):
        self.kind = kind
        self.reference_id = reference_id
        self.public_error = f"{kind.capitalize()} not found"
        super().__init__(
            message or f"{kind.capitalize()} does not exist",
            details=[{f"{kind}_id": reference_id, "message": message or f"{kind.capitalize()} does not exist"}],
        )


class InsufficientStock(SaleError):
    """
    A conditional stock decrement failed; prior decrements were compensated.

    available is informational: a separate read taken right after the failed
    decrement and before compensation. It is not reserved and may already be
    stale when the caller sees it.
    """
    status_code = 409
    public_error = "Insufficient stock"

    def __init__(self, product_id: int, product_name: str, requested: int, available: int):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            "Insufficient stock to complete the sale",
            details=[{
                "product_id": product_id,
                "product_name": product_name,
                "requested": requested,
                "available": available,
                "message": "Insufficient stock to complete the sale",
            }],
        )


class DuplicateIdentifier(SaleError):
    """The sale folio already exists in the sale store."""
    status_code = 409
    public_error = "Conflict"

    def __init__(self, sale_id: str):
        self.sale_id = sale_id
        super().__init__("Duplicate value for: sale_id", details={"sale_id": sale_id})


class PersistenceConflict(SaleError):
    """The sale could not be committed; reserved stock was released."""
    status_code = 409
    public_error = "Conflict"


class AlreadyCanceled(SaleError):
    """Idempotency guard: the sale was canceled before. Carries the original cancellation."""
    status_code = 409
    public_error = "Sale already canceled"

    def __init__(self, sale_id: str, canceled_at: str | None, cancel_reason: str):
        self.sale_id = sale_id
        self.canceled_at = canceled_at
        self.cancel_reason = cancel_reason
        super().__init__(
            "Sale already canceled",
            details={"sale_id": sale_id, "canceled_at": canceled_at, "cancel_reason": cancel_reason},
        )


class NotFound(SaleError):
    """No sale with this folio."""
    status_code = 404
    public_error = "Sale not found"

    def __init__(self, sale_id: str):
        self.sale_id = sale_id
        super().__init__("Sale not found", details={"sale_id": sale_id})
