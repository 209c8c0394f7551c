from datetime import datetime, timezone


def list_notifications() -> list:
    """Sample notification feed shown on the notifications page"""
    timestamp = datetime.now(timezone.utc).isoformat()
    return [
        {
            "id": 1,
            "type": "order",
            "title": "Your order has been shipped!",
            "message": "Your product is on the way.",
            "timestamp": timestamp,
            "read": False,
        },
        {
            "id": 2,
            "type": "favorites",
            "title": "New product added!",
            "message": "A new item has been added to your favorites.",
            "timestamp": timestamp,
            "read": False,
        },
    ]
