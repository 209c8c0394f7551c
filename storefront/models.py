"""
Data models for the storefront: stored records, request bodies and filters.

Records are serialized with camelCase aliases, matching what the frontend reads.
"""
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Generic, List, Literal, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

FavoriteKind = Literal["product", "event"]

T = TypeVar("T")


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Naive datetimes are taken as UTC so seeded and submitted values sort together
UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =====================================================
# Records
# =====================================================

class User(CamelModel):
    id: str = Field(default_factory=_new_id)
    username: str
    password_hash: str = Field(exclude=True)
    location: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    created_at: UtcDatetime = Field(default_factory=_now)


class PublicUser(CamelModel):
    id: str
    username: str
    location: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    created_at: UtcDatetime

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(**user.model_dump(exclude={"password_hash"}))


class Product(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    image_url: Optional[str] = None
    brand: Optional[str] = None
    rating: Decimal = Decimal("0")
    review_count: int = 0
    stock_quantity: int = 0
    sku: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: UtcDatetime = Field(default_factory=_now)


class Event(CamelModel):
    id: str = Field(default_factory=_new_id)
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    price: Decimal = Decimal("0")
    start_date: UtcDatetime
    end_date: UtcDatetime
    location: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    organizer_name: Optional[str] = None
    organizer_email: Optional[str] = None
    max_attendees: Optional[int] = None
    current_attendees: int = 0
    is_active: bool = True
    created_at: UtcDatetime = Field(default_factory=_now)


class CartItem(CamelModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    product_id: str
    quantity: int = Field(1, ge=1)
    created_at: UtcDatetime = Field(default_factory=_now)


class CartLine(CartItem):
    """Cart item with its product embedded, as listed by GET /api/cart."""

    product: Product


class Favorite(CamelModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    kind: FavoriteKind
    item_id: str
    created_at: UtcDatetime = Field(default_factory=_now)


class Registration(CamelModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    event_id: str
    created_at: UtcDatetime = Field(default_factory=_now)


# =====================================================
# Request bodies
# =====================================================

class UserCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    location: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None


class LoginRequest(CamelModel):
    username: str
    password: str


class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    original_price: Optional[Decimal] = Field(None, ge=0)
    image_url: Optional[str] = None
    brand: Optional[str] = None
    rating: Decimal = Field(Decimal("0"), ge=0, le=5)
    review_count: int = Field(0, ge=0)
    stock_quantity: int = Field(0, ge=0)
    sku: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class EventCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    price: Decimal = Field(Decimal("0"), ge=0)
    start_date: UtcDatetime
    end_date: UtcDatetime
    location: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    organizer_name: Optional[str] = None
    organizer_email: Optional[str] = None
    max_attendees: Optional[int] = Field(None, ge=1)

    @model_validator(mode="after")
    def _check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class CartAdd(CamelModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class CartUpdate(CamelModel):
    quantity: int = Field(..., ge=1)


class FavoriteCreate(CamelModel):
    product_id: Optional[str] = None
    event_id: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_target(self):
        if bool(self.product_id) == bool(self.event_id):
            raise ValueError("exactly one of productId or eventId is required")
        return self

    @property
    def kind(self) -> FavoriteKind:
        return "product" if self.product_id else "event"

    @property
    def item_id(self) -> str:
        return self.product_id or self.event_id


# =====================================================
# Filters & pages
# =====================================================

class ProductFilters(CamelModel):
    category: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    brand: Optional[str] = None
    search: Optional[str] = None


class GeoRadius(BaseModel):
    latitude: float
    longitude: float
    radius: float = Field(..., ge=0)


class EventFilters(CamelModel):
    category: Optional[str] = None
    max_price: Optional[float] = None
    search: Optional[str] = None
    location: Optional[GeoRadius] = None


class Page(CamelModel, Generic[T]):
    items: List[T]
    total: int
    limit: int
    offset: int
