from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, Date, DateTime, Numeric, Float, Boolean
from sqlalchemy.orm import relationship

from urban_harvest.data.database import Base


class SubscriptionBoxModel(Base):
    __tablename__ = "subscription_boxes"

    box_id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    frequency = Column(String(20), nullable=False, default="monthly")  # weekly, biweekly, monthly
    image_url = Column(String(500))
    rating = Column(Float, nullable=False, default=0)
    reviews_count = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "SubscriptionBoxItemModel",
        order_by="SubscriptionBoxItemModel.display_order",
        cascade="all, delete-orphan",
    )


class SubscriptionBoxItemModel(Base):
    __tablename__ = "subscription_box_items"

    item_id = Column(Integer, primary_key=True)
    box_id = Column(Integer, ForeignKey("subscription_boxes.box_id", ondelete="CASCADE"), nullable=False)
    item_name = Column(String(200), nullable=False)
    quantity = Column(String(50))
    description = Column(String(500), default="")
    display_order = Column(Integer, nullable=False)


class SubscriptionModel(Base):
    __tablename__ = "subscriptions"

    subscription_id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    box_id = Column(Integer, ForeignKey("subscription_boxes.box_id", ondelete="CASCADE"), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.order_id", ondelete="SET NULL"))

    status = Column(String(20), nullable=False, default="active")  # active, paused, cancelled
    start_date = Column(Date, nullable=False)
    next_delivery_date = Column(Date)
    cancelled_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
