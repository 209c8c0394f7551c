def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_products_sorted_by_rating(client):
    response = client.get("/api/products")
    assert response.status_code == 200
    body = response.json()
    assert [p["id"] for p in body] == ["3", "1", "5", "2", "4"]
    assert body[1]["price"] == "89.99"
    assert body[1]["originalPrice"] == "129.99"
    assert "isActive" in body[1]


def test_list_products_with_filters(client):
    response = client.get("/api/products", params={"category": "Electronics", "maxPrice": 80})
    assert [p["id"] for p in response.json()] == ["4"]

    response = client.get("/api/products", params={"search": "cotton", "sort": "price_asc"})
    assert [p["id"] for p in response.json()] == ["5"]


def test_list_products_paginated(client):
    response = client.get("/api/products", params={"limit": 2, "offset": 1})
    body = response.json()
    assert body["total"] == 5
    assert body["limit"] == 2
    assert [p["id"] for p in body["items"]] == ["1", "5"]


def test_unknown_sort_is_bad_request(client):
    response = client.get("/api/products", params={"sort": "popularity"})
    assert response.status_code == 400
    assert "Unknown sort" in response.json()["error"]


def test_get_product(client):
    assert client.get("/api/products/2").json()["name"] == "Ergonomic Office Chair"

    response = client.get("/api/products/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_create_product(client):
    response = client.post("/api/products", json={
        "name": "Canvas Tote",
        "price": "15.00",
        "category": "Accessories",
        "tags": ["bag"],
    })
    assert response.status_code == 201
    created = response.json()
    assert created["reviewCount"] == 0

    found = client.get("/api/products", params={"search": "tote"}).json()
    assert [p["id"] for p in found] == [created["id"]]


def test_create_product_invalid(client):
    response = client.post("/api/products", json={"name": "Free lunch", "price": -1})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"


def test_list_events(client):
    body = client.get("/api/events").json()
    assert [e["id"] for e in body] == ["3", "4", "1", "2"]
    assert body[0]["startDate"].startswith("2024-03-15T09:00:00")


def test_list_events_near(client):
    params = {"lat": 37.7749, "lng": -122.4194, "radius": 0.5}
    assert [e["id"] for e in client.get("/api/events", params=params).json()] == ["1"]

    # Radius is ignored unless lat, lng and radius are all given
    partial = {"lat": 37.7749, "radius": 0.5}
    assert len(client.get("/api/events", params=partial).json()) == 4


def test_list_events_by_price_and_category(client):
    assert [e["id"] for e in client.get("/api/events", params={"maxPrice": 0}).json()] == ["4", "1"]
    assert [e["id"] for e in client.get("/api/events", params={"category": "workshop"}).json()] == ["2"]


def test_get_event(client):
    assert client.get("/api/events/1").json()["title"] == "Small Business Networking Mixer"
    assert client.get("/api/events/42").status_code == 404


def test_create_event_rejects_reversed_dates(client):
    response = client.post("/api/events", json={
        "title": "Backwards",
        "startDate": "2024-09-02T10:00:00",
        "endDate": "2024-09-01T10:00:00",
    })
    assert response.status_code == 400


def test_notifications(client):
    body = client.get("/api/notifications").json()
    assert [n["type"] for n in body] == ["order", "favorites"]
    assert all(n["read"] is False for n in body)


def test_nan_price_bounds_are_ignored(client):
    assert len(client.get("/api/products", params={"maxPrice": "nan"}).json()) == 5
    assert len(client.get("/api/products", params={"minPrice": "nan", "maxPrice": 80}).json()) == 3
    assert len(client.get("/api/events", params={"maxPrice": "nan"}).json()) == 4


def test_nan_coordinates_are_ignored(client):
    params = {"lat": "nan", "lng": -122.4194, "radius": 0.5}
    assert len(client.get("/api/events", params=params).json()) == 4
