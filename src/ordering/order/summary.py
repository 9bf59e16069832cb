"""Order summary query — the order as customers, chefs and admins see it."""

import json

from protean.utils.globals import current_domain

from ordering.order.order import Order
from ordering.pricing import format_amount, line_total, unit_price_of


def get_order_summary(order_id) -> dict:
    """Load the order from its event stream and render it as a plain dict.

    Raises ``ObjectNotFoundError`` when no such order exists.
    """
    order = current_domain.repository_for(Order).get(order_id)
    address = order.delivery_address

    return {
        "order_id": str(order.id),
        "status": order.status,
        "payment_status": order.payment_status,
        "customer_id": str(order.customer_id),
        "customer_email": order.customer_email,
        "customer_contact_number": order.customer_contact_number,
        "chef_id": str(order.chef_id),
        "chef_name": order.chef_name,
        "requested_time": order.requested_time.isoformat() if order.requested_time else None,
        "delivery_address": {
            "address_line": address.address_line,
            "city": address.city,
            "state": address.state,
            "zip_code": address.zip_code,
            "access_note": address.access_note,
        }
        if address
        else None,
        "payment_method_type": order.payment_method_type,
        "payment_details": order.payment_details,
        "items": [
            {
                "line_item_id": str(item.id),
                "dish_id": str(item.dish_id) if item.dish_id else None,
                "dish_name": item.label(),
                "quantity": item.quantity,
                "unit_price": unit_price_of(item),
                "line_total": line_total(item),
                "dish_type": item.dish_type,
                "customization_options": json.loads(item.customization_options) if item.customization_options else [],
                "dish_note": item.dish_note,
                "is_custom": item.is_custom,
                "custom_description": item.custom_description,
            }
            for item in order.items
        ],
        "unpriced_items": [str(item.id) for item in order.unpriced_custom_items()],
        "total_amount": order.total_amount,
        "original_amount": order.original_amount,
        "cancellation_fee": order.cancellation_fee,
        "currency": order.currency,
        "display_total": format_amount(order.total_amount, order.currency),
        "cancellation_reason": order.cancellation_reason,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }
