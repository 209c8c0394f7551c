from typing import Optional

from fastapi import APIRouter, Depends, Query

from .auth import register_auth_routes
from .cart import build_cart_summary, checkout
from .catalog import paginate
from .errors import NotFoundError
from .models import (
    CartAdd,
    CartUpdate,
    EventCreate,
    EventFilters,
    FavoriteCreate,
    FavoriteKind,
    GeoRadius,
    ProductCreate,
    ProductFilters,
)
from .notifications import list_notifications
from .session import current_user_id, require_user
from .storage import storage


def _maybe_paginate(items, limit: Optional[int], offset: Optional[int]):
    # Plain list unless the caller asks for a page
    if limit is None and offset is None:
        return items
    return paginate(items, limit, offset)


def register_api_routes(app):

    # Account endpoints
    register_auth_routes(app)

    router = APIRouter(prefix="/api", tags=["storefront"])

    # ---------------------------------------------------
    # Products
    # ---------------------------------------------------
    @router.get("/products")
    async def list_products(
        category: Optional[str] = Query(None),
        min_price: Optional[float] = Query(None, alias="minPrice"),
        max_price: Optional[float] = Query(None, alias="maxPrice"),
        brand: Optional[str] = Query(None),
        search: Optional[str] = Query(None, description="Search term"),
        sort: Optional[str] = Query(None, description="rating | price_asc | price_desc | newest"),
        limit: Optional[int] = Query(None, ge=1),
        offset: Optional[int] = Query(None, ge=0),
    ):
        filters = ProductFilters(
            category=category, min_price=min_price, max_price=max_price, brand=brand, search=search
        )
        return _maybe_paginate(storage.get_products(filters, sort), limit, offset)

    @router.get("/products/{product_id}")
    async def get_product(product_id: str):
        product = storage.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    @router.post("/products", status_code=201)
    async def create_product(body: ProductCreate):
        return storage.create_product(body)

    # ---------------------------------------------------
    # Events
    # ---------------------------------------------------
    @router.get("/events")
    async def list_events(
        category: Optional[str] = Query(None),
        max_price: Optional[float] = Query(None, alias="maxPrice"),
        search: Optional[str] = Query(None),
        lat: Optional[float] = Query(None),
        lng: Optional[float] = Query(None),
        radius: Optional[float] = Query(None, ge=0, description="Miles"),
        limit: Optional[int] = Query(None, ge=1),
        offset: Optional[int] = Query(None, ge=0),
    ):
        location = None
        if lat is not None and lng is not None and radius is not None:
            location = GeoRadius(latitude=lat, longitude=lng, radius=radius)

        filters = EventFilters(category=category, max_price=max_price, search=search, location=location)
        return _maybe_paginate(storage.get_events(filters), limit, offset)

    @router.get("/events/{event_id}")
    async def get_event(event_id: str):
        event = storage.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    @router.post("/events", status_code=201)
    async def create_event(body: EventCreate):
        return storage.create_event(body)

    @router.post("/events/{event_id}/register", status_code=201)
    async def register_for_event(event_id: str, user_id: str = Depends(require_user)):
        return storage.register_for_event(user_id, event_id)

    @router.delete("/events/{event_id}/register")
    async def cancel_registration(event_id: str, user_id: str = Depends(require_user)):
        if not storage.cancel_registration(user_id, event_id):
            raise NotFoundError("Registration not found")
        return {"success": True}

    @router.get("/registrations")
    async def list_registrations(user_id: str = Depends(require_user)):
        return storage.get_user_registrations(user_id)

    # ---------------------------------------------------
    # Cart
    # ---------------------------------------------------
    @router.get("/cart")
    async def get_cart(user_id: str = Depends(current_user_id)):
        return storage.get_cart_items(user_id)

    @router.get("/cart/summary")
    async def get_cart_summary(user_id: str = Depends(current_user_id)):
        return build_cart_summary(user_id)

    @router.post("/cart")
    async def add_to_cart(body: CartAdd, user_id: str = Depends(current_user_id)):
        return storage.add_to_cart(user_id, body.product_id, body.quantity)

    @router.put("/cart/{product_id}")
    async def update_cart_item(product_id: str, body: CartUpdate, user_id: str = Depends(current_user_id)):
        if not storage.update_cart_item(user_id, product_id, body.quantity):
            raise NotFoundError("Cart item not found")
        return {"success": True}

    @router.delete("/cart/{product_id}")
    async def remove_from_cart(product_id: str, user_id: str = Depends(current_user_id)):
        if not storage.remove_from_cart(user_id, product_id):
            raise NotFoundError("Cart item not found")
        return {"success": True}

    @router.delete("/cart")
    async def clear_cart(user_id: str = Depends(current_user_id)):
        removed = storage.clear_cart(user_id)
        return {"success": True, "removed": removed}

    @router.post("/checkout")
    async def checkout_endpoint(user_id: str = Depends(current_user_id)):
        order = checkout(user_id)
        return {
            "success": True,
            "message": f"Order received! Total: {order['totalFormatted']}",
            "order": order,
        }

    # ---------------------------------------------------
    # Favorites
    # ---------------------------------------------------
    @router.get("/favorites")
    async def list_favorites(
        kind: FavoriteKind = Query("product"),
        user_id: str = Depends(current_user_id),
    ):
        return storage.get_user_favorites(user_id, kind)

    @router.post("/favorites")
    async def add_favorite(body: FavoriteCreate, user_id: str = Depends(current_user_id)):
        return storage.add_favorite(user_id, body.kind, body.item_id)

    @router.delete("/favorites/{item_id}")
    async def remove_favorite(
        item_id: str,
        kind: FavoriteKind = Query("product"),
        user_id: str = Depends(current_user_id),
    ):
        if not storage.remove_favorite(user_id, kind, item_id):
            raise NotFoundError("Favorite not found")
        return {"success": True}

    @router.get("/favorites/{item_id}/check")
    async def check_favorite(
        item_id: str,
        kind: FavoriteKind = Query("product"),
        user_id: str = Depends(current_user_id),
    ):
        return {"isFavorite": storage.is_favorite(user_id, kind, item_id)}

    @router.post("/favorites/{item_id}/toggle")
    async def toggle_favorite(
        item_id: str,
        kind: FavoriteKind = Query("product"),
        user_id: str = Depends(current_user_id),
    ):
        return {"isFavorite": storage.toggle_favorite(user_id, kind, item_id)}

    # ---------------------------------------------------
    # Notifications
    # ---------------------------------------------------
    @router.get("/notifications")
    async def get_notifications():
        return list_notifications()

    app.include_router(router)
