# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/cafecito/routes/sales.py
"""Sales API routes: create, lookup by folio, cancel"""

from flask import Blueprint, request, jsonify, current_app

from ..services import sales_service, lifecycle_service
from ..services.ticket_service import build_ticket
from ..errors import SaleError
from ..validation import normalize_cancel_reason


sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


def _error_response(e: SaleError):
    return jsonify(e.to_dict()), e.status_code


@sales_bp.post("/")
def create_sale_route():
    """
    Create a committed sale from a cart.

    Body: {"customer_id": int|null, "payment_method": "cash"|"card"|"transfer",
           "items": [{"product_id": int, "quantity": int}, ...]}
    """
    try:
        data = request.get_json(silent=True)
        sale = sales_service.create_sale(data)

        return jsonify({
            "sale": sale.to_dict(),
            "ticket": build_ticket(sale, store_name=current_app.config["STORE_NAME"]),
        }), 201

    except SaleError as e:
        return _error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/<sale_id>")
def get_sale_route(sale_id: str):
    """Get a sale with its items by folio."""
    try:
        sale = sales_service.get_sale(sale_id)
        return jsonify({"sale": sale.to_dict()}), 200

    except SaleError as e:
        return _error_response(e)
    except Exception:
        current_app.logger.exception("Failed to load sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.patch("/<sale_id>/cancel")
def cancel_sale_route(sale_id: str):
    """
    Cancel a completed sale and restore its stock.

    Body: {"reason": str} (optional)
    A cancellation whose stock restoration failed for some items still
    answers 200, with restoration="partial" and the list of warnings.
    """
    try:
        data = request.get_json(silent=True) or {}
        reason = normalize_cancel_reason(data.get("reason") if isinstance(data, dict) else None)

        outcome = lifecycle_service.cancel_sale(sale_id, reason)

        if outcome.restoration == lifecycle_service.RESTORATION_COMPLETE:
            message = "Sale canceled and stock restored"
        else:
            message = "Sale canceled; stock was only partially restored"

        body = {
            "ok": True,
            "message": message,
            "sale": outcome.sale.to_dict(),
            "restoration": outcome.restoration,
        }
        warnings = outcome.warnings
        if warnings:
            body["warnings"] = warnings
        return jsonify(body), 200

    except SaleError as e:
        return _error_response(e)
    except Exception:
        current_app.logger.exception("Failed to cancel sale")
        return jsonify({"error": "Internal server error"}), 500
