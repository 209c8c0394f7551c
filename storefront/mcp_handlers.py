from typing import Optional

from mcp.server.fastmcp import FastMCP

from . import config
from .cart import build_cart_summary, checkout as place_order
from .catalog import search_catalog
from .errors import StoreError
from .models import EventFilters, ProductFilters
from .storage import storage


def _dump(records) -> list:
    return [r.model_dump(mode="json", by_alias=True) for r in records]


def register_mcp(mcp: FastMCP):
    """MCP tool registration"""
    user_id = config.AGENT_USER_ID

    @mcp.tool()
    async def search_products(query: str = "", category: Optional[str] = None, max_price: Optional[float] = None) -> dict:
        """Search the product catalog"""
        filters = ProductFilters(search=query or None, category=category, max_price=max_price)
        results = storage.get_products(filters)
        return {
            "products": _dump(results),
            "count": len(results),
            "message": f"{len(results)} products found"
        }

    @mcp.tool()
    async def search_events(query: str = "", category: Optional[str] = None) -> dict:
        """Search upcoming events"""
        results = storage.get_events(EventFilters(search=query or None, category=category))
        return {
            "events": _dump(results),
            "count": len(results),
            "message": f"{len(results)} events found"
        }

    @mcp.tool()
    async def search_everything(query: str = "") -> dict:
        """Search products and events at once"""
        found = search_catalog(query, storage.products.values(), storage.events.values())
        return {
            "products": _dump(found["products"]),
            "events": _dump(found["events"]),
            "count": len(found["products"]) + len(found["events"]),
        }

    @mcp.tool()
    async def add_to_cart(product_id: str, quantity: int = 1) -> dict:
        """Add a product to the cart"""
        if quantity < 1:
            return {"success": False, "message": "Quantity must be at least 1"}
        try:
            storage.add_to_cart(user_id, product_id, quantity)
        except StoreError as e:
            return {"success": False, "message": e.message}

        product = storage.get_product(product_id)
        return {
            "success": True,
            "message": f"{product.name} added to cart",
            "cart": build_cart_summary(user_id)
        }

    @mcp.tool()
    async def remove_from_cart(product_id: str) -> dict:
        """Remove a product from the cart"""
        if not storage.remove_from_cart(user_id, product_id):
            return {"success": False, "message": "Product is not in the cart"}

        return {
            "success": True,
            "message": "Product removed from cart",
            "cart": build_cart_summary(user_id)
        }

    @mcp.tool()
    async def get_cart() -> dict:
        """Show the cart"""
        summary = build_cart_summary(user_id)

        if summary["isEmpty"]:
            return {
                "isEmpty": True,
                "message": "Your cart is empty",
                "cart": summary
            }

        return {
            "isEmpty": False,
            "message": f"{summary['totalQuantity']} items in your cart",
            "cart": summary
        }

    @mcp.tool()
    async def checkout() -> dict:
        """Place the order and empty the cart"""
        try:
            order = place_order(user_id)
        except StoreError as e:
            return {"success": False, "message": e.message}

        return {
            "success": True,
            "message": f"Order received! Total: {order['totalFormatted']}",
            "order": order
        }
