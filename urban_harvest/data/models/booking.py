from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime, Numeric

from urban_harvest.data.database import Base


class BookingModel(Base):
    __tablename__ = "bookings"

    booking_id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.event_id", ondelete="CASCADE"))
    workshop_id = Column(Integer, ForeignKey("workshops.workshop_id", ondelete="CASCADE"))
    booking_type = Column(String(20), nullable=False)  # event, workshop

    customer_name = Column(String(100))
    customer_email = Column(String(255))
    customer_phone = Column(String(20))
    special_requests = Column(Text)

    quantity = Column(Integer, nullable=False, default=1)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    payment_method = Column(String(20), nullable=False, default="card")
    status = Column(String(20), nullable=False, default="confirmed")  # confirmed, attended, cancelled
    booking_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
