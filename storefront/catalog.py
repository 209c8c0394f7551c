import math
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from . import config
from .errors import ValidationError
from .models import Event, EventFilters, Page, Product, ProductFilters

SAMPLE_PRODUCTS = [
    {
        "id": "1",
        "name": "Wireless Bluetooth Headphones",
        "description": "Premium quality wireless headphones with noise cancellation and 30-hour battery life. Perfect for music lovers and professionals.",
        "category": "Electronics",
        "price": "89.99",
        "original_price": "129.99",
        "image_url": "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?auto=format&fit=crop&w=800&h=400",
        "brand": "TechSound",
        "rating": "4.5",
        "review_count": 245,
        "stock_quantity": 50,
        "sku": "TS-WBH-001",
        "tags": ["wireless", "bluetooth", "noise-cancelling"],
        "created_at": datetime(2024, 7, 1, 9, 0),
    },
    {
        "id": "2",
        "name": "Ergonomic Office Chair",
        "description": "Comfortable ergonomic office chair with lumbar support and adjustable height. Ideal for long working hours.",
        "category": "Furniture",
        "price": "199.99",
        "original_price": "299.99",
        "image_url": "https://images.unsplash.com/photo-1586023492125-27b2c045efd7?auto=format&fit=crop&w=800&h=400",
        "brand": "ComfortDesk",
        "rating": "4.3",
        "review_count": 156,
        "stock_quantity": 25,
        "sku": "CD-EOC-002",
        "tags": ["ergonomic", "office", "adjustable"],
        "created_at": datetime(2024, 7, 2, 9, 0),
    },
    {
        "id": "3",
        "name": "Stainless Steel Water Bottle",
        "description": "Insulated stainless steel water bottle that keeps drinks cold for 24 hours and hot for 12 hours. BPA-free and eco-friendly.",
        "category": "Sports & Outdoors",
        "price": "24.99",
        "original_price": "34.99",
        "image_url": "https://images.unsplash.com/photo-1602143407151-7111542de6e8?auto=format&fit=crop&w=800&h=400",
        "brand": "HydroLife",
        "rating": "4.7",
        "review_count": 89,
        "stock_quantity": 100,
        "sku": "HL-SSW-003",
        "tags": ["insulated", "stainless-steel", "eco-friendly"],
        "created_at": datetime(2024, 7, 3, 9, 0),
    },
    {
        "id": "4",
        "name": "Smart Fitness Tracker",
        "description": "Advanced fitness tracker with heart rate monitoring, sleep tracking, and 7-day battery life. Compatible with iOS and Android.",
        "category": "Electronics",
        "price": "79.99",
        "original_price": "99.99",
        "image_url": "https://images.unsplash.com/photo-1544117519-31a4b719223d?auto=format&fit=crop&w=800&h=400",
        "brand": "FitTech",
        "rating": "4.2",
        "review_count": 203,
        "stock_quantity": 75,
        "sku": "FT-SFT-004",
        "tags": ["fitness", "smartwatch", "health"],
        "created_at": datetime(2024, 7, 4, 9, 0),
    },
    {
        "id": "5",
        "name": "Organic Cotton T-Shirt",
        "description": "Super soft organic cotton t-shirt in various colors. Sustainable fashion choice with comfortable fit.",
        "category": "Clothing",
        "price": "29.99",
        "original_price": None,
        "image_url": "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?auto=format&fit=crop&w=800&h=400",
        "brand": "EcoWear",
        "rating": "4.4",
        "review_count": 67,
        "stock_quantity": 200,
        "sku": "EW-OCT-005",
        "tags": ["organic", "cotton", "sustainable"],
        "created_at": datetime(2024, 7, 5, 9, 0),
    },
]

SAMPLE_EVENTS = [
    {
        "id": "1",
        "title": "Small Business Networking Mixer",
        "description": "Connect with local business owners and entrepreneurs. Light refreshments provided.",
        "category": "Networking",
        "price": "0",
        "image_url": "https://images.unsplash.com/photo-1515187029135-18ee286d815b?auto=format&fit=crop&w=800&h=200",
        "location": "Downtown Convention Center",
        "address": "123 Convention Ave, San Francisco, CA",
        "latitude": "37.7749",
        "longitude": "-122.4194",
        "start_date": datetime(2024, 8, 4, 18, 0),
        "end_date": datetime(2024, 8, 4, 20, 0),
        "organizer_name": "SF Business Network",
        "organizer_email": "events@sfbiznet.com",
        "max_attendees": 100,
        "created_at": datetime(2024, 7, 1, 9, 0),
    },
    {
        "id": "2",
        "title": "Digital Marketing for Small Business",
        "description": "Learn effective digital marketing strategies on a budget. Includes hands-on exercises and resource guide.",
        "category": "Workshop",
        "price": "35",
        "image_url": "https://images.unsplash.com/photo-1460925895917-afdab827c52f?auto=format&fit=crop&w=800&h=200",
        "location": "Tech Hub Co-working Space",
        "address": "456 Tech St, San Francisco, CA",
        "latitude": "37.7849",
        "longitude": "-122.4094",
        "start_date": datetime(2024, 8, 5, 14, 0),
        "end_date": datetime(2024, 8, 5, 17, 0),
        "organizer_name": "Digital Growth Academy",
        "organizer_email": "workshops@digitalgrowth.com",
        "max_attendees": 30,
        "created_at": datetime(2024, 7, 1, 9, 0),
    },
    {
        "id": "3",
        "title": "Local Business Expo 2024",
        "description": "Discover new vendors, attend seminars, and showcase your business. Over 100 exhibitors expected.",
        "category": "Trade Show",
        "price": "45",
        "image_url": "https://images.unsplash.com/photo-1540575467063-178a50c2df87?auto=format&fit=crop&w=800&h=200",
        "location": "City Exhibition Hall",
        "address": "789 Expo Blvd, San Francisco, CA",
        "latitude": "37.7649",
        "longitude": "-122.4294",
        "start_date": datetime(2024, 3, 15, 9, 0),
        "end_date": datetime(2024, 3, 15, 18, 0),
        "organizer_name": "Bay Area Business Alliance",
        "organizer_email": "expo@bayareabiz.org",
        "max_attendees": 500,
        "created_at": datetime(2024, 3, 1, 9, 0),
    },
    {
        "id": "4",
        "title": "Small Business Financial Planning",
        "description": "Learn budgeting, cash flow management, and tax planning strategies for small businesses.",
        "category": "Seminar",
        "price": "0",
        "image_url": "https://images.unsplash.com/photo-1554224155-6726b3ff858f?auto=format&fit=crop&w=800&h=200",
        "location": "Public Library - Main Branch",
        "address": "100 Library St, San Francisco, CA",
        "latitude": "37.7549",
        "longitude": "-122.4394",
        "start_date": datetime(2024, 3, 18, 19, 0),
        "end_date": datetime(2024, 3, 18, 21, 0),
        "organizer_name": "Financial Literacy Foundation",
        "organizer_email": "seminars@finlit.org",
        "max_attendees": 50,
        "created_at": datetime(2024, 3, 1, 9, 0),
    },
]

# Rough miles per degree, good enough for "events near me"
MILES_PER_DEGREE = 69

PRODUCT_SORTS = {
    "rating": (lambda p: p.rating, True),
    "price_asc": (lambda p: p.price, False),
    "price_desc": (lambda p: p.price, True),
    "newest": (lambda p: p.created_at, True),
}


def _contains(value: Optional[str], q: str) -> bool:
    return bool(value) and q in value.lower()


def _same(value: Optional[str], expected: str) -> bool:
    return (value or "").lower() == expected.lower()


def _bound(value: Optional[float]) -> Optional[float]:
    # NaN or infinite bounds are ignored like missing ones
    if value is None or not math.isfinite(value):
        return None
    return value


def _category_filter(category: Optional[str]) -> Optional[str]:
    if not category or category.lower() == "all":
        return None
    return category


def filter_products(products: Iterable[Product], filters: Optional[ProductFilters] = None) -> List[Product]:
    results = [p for p in products if p.is_active]
    if not filters:
        return results

    category = _category_filter(filters.category)
    if category:
        results = [p for p in results if _same(p.category, category)]

    min_price = _bound(filters.min_price)
    if min_price is not None:
        results = [p for p in results if float(p.price) >= min_price]

    max_price = _bound(filters.max_price)
    if max_price is not None:
        results = [p for p in results if float(p.price) <= max_price]

    if filters.brand:
        results = [p for p in results if _same(p.brand, filters.brand)]

    if filters.search:
        q = filters.search.lower()
        results = [
            p for p in results
            if _contains(p.name, q)
            or _contains(p.description, q)
            or _contains(p.category, q)
            or _contains(p.brand, q)
            or any(q in tag.lower() for tag in p.tags)
        ]

    return results


def sort_products(products: Iterable[Product], sort: Optional[str] = None) -> List[Product]:
    key_name = sort or "rating"
    if key_name not in PRODUCT_SORTS:
        raise ValidationError(f"Unknown sort '{key_name}', expected one of: {', '.join(PRODUCT_SORTS)}")
    key, reverse = PRODUCT_SORTS[key_name]
    return sorted(products, key=key, reverse=reverse)


def distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    return math.sqrt((lat1 - lat2) ** 2 + (lng1 - lng2) ** 2) * MILES_PER_DEGREE


def filter_events(events: Iterable[Event], filters: Optional[EventFilters] = None) -> List[Event]:
    results = [e for e in events if e.is_active]
    if not filters:
        return results

    category = _category_filter(filters.category)
    if category:
        results = [e for e in results if _same(e.category, category)]

    max_price = _bound(filters.max_price)
    if max_price is not None:
        results = [e for e in results if float(e.price) <= max_price]

    if filters.search:
        q = filters.search.lower()
        results = [
            e for e in results
            if _contains(e.title, q) or _contains(e.description, q) or _contains(e.category, q)
        ]

    loc = filters.location
    if loc and all(math.isfinite(v) for v in (loc.latitude, loc.longitude, loc.radius)):
        results = [
            e for e in results
            if e.latitude is not None and e.longitude is not None
            and distance_miles(float(e.latitude), float(e.longitude), loc.latitude, loc.longitude) <= loc.radius
        ]

    return results


def sort_events(events: Iterable[Event]) -> List[Event]:
    return sorted(events, key=lambda e: e.start_date)


def paginate(items: Sequence, limit: Optional[int] = None, offset: Optional[int] = None) -> Page:
    limit = config.DEFAULT_PAGE_SIZE if limit is None else limit
    limit = max(1, min(limit, config.MAX_PAGE_SIZE))
    offset = max(0, offset or 0)
    return Page(items=list(items[offset:offset + limit]), total=len(items), limit=limit, offset=offset)


def search_catalog(query: Optional[str], products: Iterable[Product], events: Iterable[Event]) -> dict:
    """Free-text search across products and events (agent tools)."""
    if not query:
        return {"products": sort_products(filter_products(products)), "events": sort_events(filter_events(events))}
    return {
        "products": sort_products(filter_products(products, ProductFilters(search=query))),
        "events": sort_events(filter_events(events, EventFilters(search=query))),
    }
