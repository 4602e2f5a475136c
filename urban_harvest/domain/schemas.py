# urban_harvest/domain/schemas.py
from datetime import date
from decimal import Decimal
from typing import List, Dict, Optional, Literal

from pydantic import BaseModel, Field, ConfigDict

Frequency = Literal["weekly", "biweekly", "monthly"]


# ---------- auth ----------

class SignupIn(BaseModel):
    """Customer self-registration. Formats are checked in AuthService."""

    name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class CurrentUser(BaseModel):
    """Claims carried by the bearer token."""

    id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "super_admin")


# ---------- events / workshops ----------

class AgendaItemIn(BaseModel):
    time: Optional[str] = None
    activity: str


class EventIn(BaseModel):
    category_id: Optional[int] = None
    organizer_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    detailed_description: Optional[str] = None
    event_date: date
    event_time: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    price: Decimal = Field(Decimal("0"), ge=0)
    total_spots: int = Field(0, ge=0)
    agenda: List[AgendaItemIn] = []
    highlights: List[str] = []
    what_to_expect: List[str] = []


class WorkshopIn(BaseModel):
    category_id: Optional[int] = None
    instructor_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    detailed_description: Optional[str] = None
    workshop_date: date
    workshop_time: Optional[str] = None
    duration: Optional[str] = None
    location: Optional[str] = None
    image: Optional[str] = None
    price: Decimal = Field(Decimal("0"), ge=0)
    total_spots: int = Field(0, ge=0)
    level: Optional[str] = None
    learning_outcomes: List[str] = []
    requirements: List[str] = []


# ---------- products ----------

class ProductIn(BaseModel):
    category_id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0)
    unit: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    stock_quantity: int = Field(0, ge=0)
    origin: Optional[str] = None
    details: Dict[str, str] = {}


# ---------- bookings ----------

class BookingIn(BaseModel):
    booking_type: str
    event_id: Optional[int] = None
    workshop_id: Optional[int] = None
    quantity: int = Field(1, ge=1)
    total_amount: Decimal = Field(Decimal("0"), ge=0)
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    special_requests: Optional[str] = None
    payment_method: str = "card"


# ---------- orders ----------

class CartLineIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    name: Optional[str] = None


class SubscriptionLineIn(BaseModel):
    box_id: int = Field(..., gt=0)
    frequency: Optional[Frequency] = None


class DeliveryInfoIn(BaseModel):
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    delivery_address: Optional[str] = None
    delivery_city: Optional[str] = None
    delivery_state: Optional[str] = None
    delivery_zip: Optional[str] = None
    payment_method: str = "card"


class BulkOrderIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cart: List[CartLineIn] = []
    subscriptions: List[SubscriptionLineIn] = []
    delivery_info: Optional[DeliveryInfoIn] = Field(None, alias="deliveryInfo")


# ---------- reviews ----------

class ProductReviewIn(BaseModel):
    product_id: int = Field(..., gt=0)
    order_id: Optional[int] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class EventReviewIn(BaseModel):
    event_id: int = Field(..., gt=0)
    booking_id: Optional[int] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class WorkshopReviewIn(BaseModel):
    workshop_id: int = Field(..., gt=0)
    booking_id: Optional[int] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class SubscriptionReviewIn(BaseModel):
    subscription_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


class ReviewBodyIn(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None


# ---------- subscription boxes ----------

class BoxItemIn(BaseModel):
    item_name: str = Field(..., min_length=1)
    quantity: Optional[str] = None
    description: Optional[str] = ""


class SubscriptionBoxIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0)
    frequency: Frequency
    image_url: Optional[str] = None
    items: Optional[List[BoxItemIn]] = None
    is_active: bool = True


class SubscriptionIn(BaseModel):
    box_id: int = Field(..., gt=0)
    frequency: Optional[Frequency] = None


# ---------- favorites ----------

ItemType = Literal["product", "event", "workshop", "subscription_box"]


class FavoriteIn(BaseModel):
    item_type: ItemType
    item_id: int = Field(..., gt=0)


# ---------- notifications ----------

class PushKeysIn(BaseModel):
    p256dh: str
    auth: str


class PushSubscriptionIn(BaseModel):
    endpoint: str = Field(..., min_length=1)
    keys: PushKeysIn


class SendNotificationIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId")
    title: Optional[str] = None
    body: Optional[str] = None
    url: Optional[str] = None


class BroadcastIn(BaseModel):
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    url: Optional[str] = None


# ---------- cart ----------

class CartValidateIn(BaseModel):
    items: List[dict]
