from datetime import datetime

import pytest

from storefront.errors import (
    AuthenticationError,
    CapacityError,
    ConflictError,
    DuplicateError,
    NotFoundError,
)
from storefront.models import EventCreate, ProductCreate, UserCreate


def test_seeded_catalog(fresh_storage):
    assert len(fresh_storage.get_products()) == 5
    assert len(fresh_storage.get_events()) == 4
    assert fresh_storage.get_product("1").name == "Wireless Bluetooth Headphones"
    assert fresh_storage.get_product("missing") is None


def test_create_user_hashes_password(fresh_storage):
    user = fresh_storage.create_user(UserCreate(username="carol", password="pa55word"))
    assert user.password_hash != "pa55word"
    assert fresh_storage.authenticate("CAROL", "pa55word").id == user.id

    with pytest.raises(AuthenticationError):
        fresh_storage.authenticate("carol", "wrong-password")
    with pytest.raises(ConflictError):
        fresh_storage.create_user(UserCreate(username="Carol", password="another1"))


def test_create_product_and_event_defaults(fresh_storage):
    product = fresh_storage.create_product(ProductCreate(name="Desk Lamp", price="19.50"))
    assert product.is_active
    assert product.stock_quantity == 0
    assert fresh_storage.get_product(product.id) is product

    event = fresh_storage.create_event(EventCreate(
        title="Pop-up Market",
        start_date=datetime(2024, 9, 1, 10, 0),
        end_date=datetime(2024, 9, 1, 16, 0),
    ))
    assert event.current_attendees == 0
    assert fresh_storage.get_events()[-1].id == event.id


def test_add_to_cart_merges_duplicates(fresh_storage):
    first = fresh_storage.add_to_cart("u1", "1", 2)
    second = fresh_storage.add_to_cart("u1", "1", 3)

    assert second.id == first.id
    assert second.quantity == 5
    assert len(fresh_storage.get_cart_items("u1")) == 1
    assert fresh_storage.get_cart_items("u2") == []


def test_add_unknown_product_to_cart(fresh_storage):
    with pytest.raises(NotFoundError):
        fresh_storage.add_to_cart("u1", "nope")


def test_cart_update_remove_and_clear(fresh_storage):
    fresh_storage.add_to_cart("u1", "1")
    fresh_storage.add_to_cart("u1", "2")

    assert fresh_storage.update_cart_item("u1", "1", 7)
    assert fresh_storage.get_cart_items("u1")[0].quantity == 7
    assert not fresh_storage.update_cart_item("u1", "3", 1)

    assert fresh_storage.remove_from_cart("u1", "2")
    assert not fresh_storage.remove_from_cart("u1", "2")

    assert fresh_storage.clear_cart("u1") == 1
    assert fresh_storage.get_cart_items("u1") == []


def test_cart_skips_inactive_products(fresh_storage):
    fresh_storage.add_to_cart("u1", "1")
    fresh_storage.products["1"].is_active = False
    assert fresh_storage.get_cart_items("u1") == []


def test_update_cart_item_for_inactive_product(fresh_storage):
    fresh_storage.add_to_cart("u1", "1")
    fresh_storage.products["1"].is_active = False

    assert not fresh_storage.update_cart_item("u1", "1", 3)


def test_favorites_add_check_remove(fresh_storage):
    fresh_storage.add_favorite("u1", "product", "2")
    fresh_storage.add_favorite("u1", "event", "2")

    assert fresh_storage.is_favorite("u1", "product", "2")
    assert [p.name for p in fresh_storage.get_user_favorites("u1")] == ["Ergonomic Office Chair"]
    assert [e.id for e in fresh_storage.get_user_favorites("u1", "event")] == ["2"]

    with pytest.raises(DuplicateError):
        fresh_storage.add_favorite("u1", "product", "2")
    with pytest.raises(NotFoundError):
        fresh_storage.add_favorite("u1", "event", "99")

    assert fresh_storage.remove_favorite("u1", "product", "2")
    assert not fresh_storage.is_favorite("u1", "product", "2")
    assert fresh_storage.is_favorite("u1", "event", "2")


def test_toggle_favorite(fresh_storage):
    assert fresh_storage.toggle_favorite("u1", "product", "3") is True
    assert fresh_storage.toggle_favorite("u1", "product", "3") is False
    assert fresh_storage.get_user_favorites("u1") == []


def test_register_for_event_counts_attendees(fresh_storage):
    fresh_storage.register_for_event("u1", "2")
    assert fresh_storage.get_event("2").current_attendees == 1
    assert fresh_storage.is_registered("u1", "2")

    with pytest.raises(DuplicateError):
        fresh_storage.register_for_event("u1", "2")

    assert fresh_storage.cancel_registration("u1", "2")
    assert fresh_storage.get_event("2").current_attendees == 0
    assert not fresh_storage.cancel_registration("u1", "2")


def test_full_event_rejects_registration(fresh_storage):
    event = fresh_storage.create_event(EventCreate(
        title="Tiny workshop",
        start_date=datetime(2024, 9, 1, 10, 0),
        end_date=datetime(2024, 9, 1, 12, 0),
        max_attendees=1,
    ))
    fresh_storage.register_for_event("u1", event.id)
    with pytest.raises(CapacityError):
        fresh_storage.register_for_event("u2", event.id)


def test_user_registrations_sorted_by_start(fresh_storage):
    fresh_storage.register_for_event("u1", "1")
    fresh_storage.register_for_event("u1", "3")
    assert [e.id for e in fresh_storage.get_user_registrations("u1")] == ["3", "1"]


def test_merge_guest_into_user(fresh_storage):
    fresh_storage.add_to_cart("guest", "1", 2)
    fresh_storage.add_to_cart("guest", "3")
    fresh_storage.add_favorite("guest", "product", "4")
    fresh_storage.add_to_cart("user", "1", 1)
    fresh_storage.add_favorite("user", "product", "4")

    fresh_storage.merge_guest("guest", "user")

    quantities = {line.product_id: line.quantity for line in fresh_storage.get_cart_items("user")}
    assert quantities == {"1": 3, "3": 1}
    assert fresh_storage.get_cart_items("guest") == []
    assert [p.id for p in fresh_storage.get_user_favorites("user")] == ["4"]
    assert fresh_storage.get_user_favorites("guest") == []
