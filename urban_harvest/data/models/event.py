from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, Date, DateTime, Numeric, Float
from sqlalchemy.orm import relationship

from urban_harvest.data.database import Base


class EventModel(Base):
    __tablename__ = "events"

    event_id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.category_id", ondelete="SET NULL"))
    organizer_id = Column(Integer, ForeignKey("organizers.organizer_id", ondelete="SET NULL"))
    created_by_user = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))

    title = Column(String(200), nullable=False)
    description = Column(Text)
    detailed_description = Column(Text)
    event_date = Column(Date, nullable=False)
    event_time = Column(String(50))
    location = Column(String(255))
    image = Column(String(500))
    price = Column(Numeric(10, 2), nullable=False, default=0)
    total_spots = Column(Integer, nullable=False, default=0)
    spots_left = Column(Integer, nullable=False, default=0)
    rating = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    agenda = relationship(
        "EventAgendaModel",
        order_by="EventAgendaModel.order_index",
        cascade="all, delete-orphan",
    )
    highlights = relationship(
        "EventHighlightModel",
        order_by="EventHighlightModel.order_index",
        cascade="all, delete-orphan",
    )
    expectations = relationship(
        "EventExpectationModel",
        order_by="EventExpectationModel.order_index",
        cascade="all, delete-orphan",
    )


class EventAgendaModel(Base):
    __tablename__ = "event_agenda"

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    time = Column(String(50))
    activity = Column(String(255), nullable=False)
    order_index = Column(Integer, nullable=False)


class EventHighlightModel(Base):
    __tablename__ = "event_highlights"

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    highlight_text = Column(String(500), nullable=False)
    order_index = Column(Integer, nullable=False)


class EventExpectationModel(Base):
    __tablename__ = "event_expectations"

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    expectation_text = Column(String(500), nullable=False)
    order_index = Column(Integer, nullable=False)
