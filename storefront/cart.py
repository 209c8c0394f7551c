import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from . import config
from .errors import ValidationError
from .storage import storage

logger = logging.getLogger(__name__)


def format_price(amount) -> str:
    return f"{config.CURRENCY_SYMBOL}{Decimal(amount):,.2f}"


def build_cart_summary(user_id: str) -> dict:
    items = []
    total_amount = Decimal("0")
    total_qty = 0

    for line in storage.get_cart_items(user_id):
        product = line.product
        subtotal = product.price * line.quantity
        items.append({
            "id": line.id,
            "productId": product.id,
            "name": product.name,
            "quantity": line.quantity,
            "unitPrice": str(product.price),
            "unitPriceFormatted": format_price(product.price),
            "subtotal": str(subtotal),
            "subtotalFormatted": format_price(subtotal),
        })

        total_amount += subtotal
        total_qty += line.quantity

    return {
        "items": items,
        "totalAmount": str(total_amount),
        "totalAmountFormatted": format_price(total_amount),
        "totalQuantity": total_qty,
        "isEmpty": not items,
    }


def checkout(user_id: str) -> dict:
    """Turn the cart into an order summary and empty it"""
    summary = build_cart_summary(user_id)
    if summary["isEmpty"]:
        raise ValidationError("Cart is empty")

    order = {
        "orderId": f"ORD-{uuid.uuid4().hex[:8].upper()}",
        "items": summary["items"],
        "total": summary["totalAmount"],
        "totalFormatted": summary["totalAmountFormatted"],
        "itemCount": summary["totalQuantity"],
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }

    storage.clear_cart(user_id)
    logger.info(f"Checkout {order['orderId']} for {user_id}: {order['totalFormatted']}")
    return order
