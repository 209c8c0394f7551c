"""
In-memory storage for the storefront.

One dict per entity, keyed by id. Methods are synchronous; the whole store lives
in a single process, which is the only writer.
"""
import logging
from typing import Dict, List, Optional

import bcrypt

from .catalog import (
    SAMPLE_EVENTS,
    SAMPLE_PRODUCTS,
    filter_events,
    filter_products,
    sort_events,
    sort_products,
)
from .errors import (
    AuthenticationError,
    CapacityError,
    ConflictError,
    DuplicateError,
    NotFoundError,
)
from .models import (
    CartItem,
    CartLine,
    Event,
    EventCreate,
    EventFilters,
    Favorite,
    FavoriteKind,
    Product,
    ProductCreate,
    ProductFilters,
    Registration,
    User,
    UserCreate,
)

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class MemStorage:
    """Handles storage of users, catalog, carts, favorites and registrations"""

    def __init__(self):
        self.reset()

    def reset(self):
        """Drop everything and load the sample catalog again"""
        self.users: Dict[str, User] = {}
        self.products: Dict[str, Product] = {}
        self.events: Dict[str, Event] = {}
        self.cart_items: Dict[str, CartItem] = {}
        self.favorites: Dict[str, Favorite] = {}
        self.registrations: Dict[str, Registration] = {}
        self._seed()

    def _seed(self):
        for data in SAMPLE_PRODUCTS:
            product = Product(**data)
            self.products[product.id] = product
        for data in SAMPLE_EVENTS:
            event = Event(**data)
            self.events[event.id] = event

    # =====================================================
    # Users
    # =====================================================

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        name = username.lower()
        return next((u for u in self.users.values() if u.username.lower() == name), None)

    def create_user(self, data: UserCreate) -> User:
        if self.get_user_by_username(data.username):
            raise ConflictError("Username already taken")

        user = User(
            username=data.username,
            password_hash=hash_password(data.password),
            location=data.location,
            latitude=data.latitude,
            longitude=data.longitude,
        )
        self.users[user.id] = user
        logger.info(f"Created user {user.username} ({user.id})")
        return user

    def authenticate(self, username: str, password: str) -> User:
        user = self.get_user_by_username(username)
        if not user or not check_password(password, user.password_hash):
            raise AuthenticationError("Invalid username or password")
        return user

    # =====================================================
    # Products
    # =====================================================

    def get_products(self, filters: Optional[ProductFilters] = None, sort: Optional[str] = None) -> List[Product]:
        return sort_products(filter_products(self.products.values(), filters), sort)

    def get_product(self, product_id: str) -> Optional[Product]:
        return self.products.get(str(product_id))

    def create_product(self, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        self.products[product.id] = product
        logger.info(f"Created product {product.name} ({product.id})")
        return product

    def _active_product(self, product_id: str) -> Product:
        product = self.get_product(product_id)
        if not product or not product.is_active:
            raise NotFoundError("Product not found")
        return product

    # =====================================================
    # Events
    # =====================================================

    def get_events(self, filters: Optional[EventFilters] = None) -> List[Event]:
        return sort_events(filter_events(self.events.values(), filters))

    def get_event(self, event_id: str) -> Optional[Event]:
        return self.events.get(str(event_id))

    def create_event(self, data: EventCreate) -> Event:
        event = Event(**data.model_dump())
        self.events[event.id] = event
        logger.info(f"Created event {event.title} ({event.id})")
        return event

    def _active_event(self, event_id: str) -> Event:
        event = self.get_event(event_id)
        if not event or not event.is_active:
            raise NotFoundError("Event not found")
        return event

    # =====================================================
    # Cart
    # =====================================================

    def _find_cart_item(self, user_id: str, product_id: str) -> Optional[CartItem]:
        return next(
            (i for i in self.cart_items.values() if i.user_id == user_id and i.product_id == product_id),
            None,
        )

    def get_cart_items(self, user_id: str) -> List[CartLine]:
        lines = []
        for item in self.cart_items.values():
            if item.user_id != user_id:
                continue
            product = self.products.get(item.product_id)
            if product and product.is_active:
                lines.append(CartLine(**item.model_dump(), product=product))
        return lines

    def add_to_cart(self, user_id: str, product_id: str, quantity: int = 1) -> CartItem:
        self._active_product(product_id)

        existing = self._find_cart_item(user_id, product_id)
        if existing:
            existing.quantity += quantity
            logger.info(f"Cart {user_id}: product {product_id} quantity now {existing.quantity}")
            return existing

        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        self.cart_items[item.id] = item
        logger.info(f"Cart {user_id}: added product {product_id} x{quantity}")
        return item

    def update_cart_item(self, user_id: str, product_id: str, quantity: int) -> bool:
        item = self._find_cart_item(user_id, product_id)
        if not item:
            return False
        product = self.products.get(product_id)
        if not product or not product.is_active:
            return False
        item.quantity = quantity
        return True

    def remove_from_cart(self, user_id: str, product_id: str) -> bool:
        item = self._find_cart_item(user_id, product_id)
        if not item:
            return False
        del self.cart_items[item.id]
        logger.info(f"Cart {user_id}: removed product {product_id}")
        return True

    def clear_cart(self, user_id: str) -> int:
        ids = [item_id for item_id, item in self.cart_items.items() if item.user_id == user_id]
        for item_id in ids:
            del self.cart_items[item_id]
        return len(ids)

    # =====================================================
    # Favorites
    # =====================================================

    def _lookup(self, kind: FavoriteKind, item_id: str):
        return self.get_product(item_id) if kind == "product" else self.get_event(item_id)

    def _find_favorite(self, user_id: str, kind: FavoriteKind, item_id: str) -> Optional[Favorite]:
        return next(
            (
                f for f in self.favorites.values()
                if f.user_id == user_id and f.kind == kind and f.item_id == item_id
            ),
            None,
        )

    def get_user_favorites(self, user_id: str, kind: FavoriteKind = "product") -> list:
        """Favorite products (or events) of a user, oldest first; inactive items are skipped"""
        items = []
        for fav in self.favorites.values():
            if fav.user_id != user_id or fav.kind != kind:
                continue
            item = self._lookup(kind, fav.item_id)
            if item and item.is_active:
                items.append(item)
        return items

    def add_favorite(self, user_id: str, kind: FavoriteKind, item_id: str) -> Favorite:
        item = self._lookup(kind, item_id)
        if not item or not item.is_active:
            raise NotFoundError(f"{kind.capitalize()} not found")
        if self._find_favorite(user_id, kind, item_id):
            raise DuplicateError(f"{kind.capitalize()} already in favorites")

        favorite = Favorite(user_id=user_id, kind=kind, item_id=item_id)
        self.favorites[favorite.id] = favorite
        logger.info(f"Favorites {user_id}: added {kind} {item_id}")
        return favorite

    def remove_favorite(self, user_id: str, kind: FavoriteKind, item_id: str) -> bool:
        favorite = self._find_favorite(user_id, kind, item_id)
        if not favorite:
            return False
        del self.favorites[favorite.id]
        logger.info(f"Favorites {user_id}: removed {kind} {item_id}")
        return True

    def is_favorite(self, user_id: str, kind: FavoriteKind, item_id: str) -> bool:
        return self._find_favorite(user_id, kind, item_id) is not None

    def toggle_favorite(self, user_id: str, kind: FavoriteKind, item_id: str) -> bool:
        """Add the favorite if absent, remove it if present; returns the new state"""
        if self.remove_favorite(user_id, kind, item_id):
            return False
        self.add_favorite(user_id, kind, item_id)
        return True

    # =====================================================
    # Registrations
    # =====================================================

    def _find_registration(self, user_id: str, event_id: str) -> Optional[Registration]:
        return next(
            (r for r in self.registrations.values() if r.user_id == user_id and r.event_id == event_id),
            None,
        )

    def register_for_event(self, user_id: str, event_id: str) -> Registration:
        event = self._active_event(event_id)
        if self._find_registration(user_id, event_id):
            raise DuplicateError("Already registered for this event")
        if event.max_attendees is not None and event.current_attendees >= event.max_attendees:
            raise CapacityError("Event is full")

        registration = Registration(user_id=user_id, event_id=event_id)
        self.registrations[registration.id] = registration
        event.current_attendees += 1
        logger.info(f"User {user_id} registered for event {event_id} ({event.current_attendees} attending)")
        return registration

    def cancel_registration(self, user_id: str, event_id: str) -> bool:
        registration = self._find_registration(user_id, event_id)
        if not registration:
            return False
        del self.registrations[registration.id]
        event = self.events.get(event_id)
        if event:
            event.current_attendees = max(0, event.current_attendees - 1)
        logger.info(f"User {user_id} cancelled registration for event {event_id}")
        return True

    def is_registered(self, user_id: str, event_id: str) -> bool:
        return self._find_registration(user_id, event_id) is not None

    def get_user_registrations(self, user_id: str) -> List[Event]:
        events = []
        for registration in self.registrations.values():
            if registration.user_id != user_id:
                continue
            event = self.events.get(registration.event_id)
            if event and event.is_active:
                events.append(event)
        return sort_events(events)

    # =====================================================
    # Guest -> user handover
    # =====================================================

    def merge_guest(self, guest_id: str, user_id: str):
        """Move a guest session's cart and favorites onto a user that just logged in"""
        for item in [i for i in self.cart_items.values() if i.user_id == guest_id]:
            del self.cart_items[item.id]
            existing = self._find_cart_item(user_id, item.product_id)
            if existing:
                existing.quantity += item.quantity
            else:
                item.user_id = user_id
                self.cart_items[item.id] = item

        for fav in [f for f in self.favorites.values() if f.user_id == guest_id]:
            del self.favorites[fav.id]
            if not self._find_favorite(user_id, fav.kind, fav.item_id):
                fav.user_id = user_id
                self.favorites[fav.id] = fav

        logger.info(f"Merged guest session {guest_id} into user {user_id}")


# Global storage instance
storage = MemStorage()
