from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, Date, DateTime, Numeric, Float
from sqlalchemy.orm import relationship

from urban_harvest.data.database import Base


class WorkshopModel(Base):
    __tablename__ = "workshops"

    workshop_id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.category_id", ondelete="SET NULL"))
    instructor_id = Column(Integer, ForeignKey("instructors.instructor_id", ondelete="SET NULL"))
    created_by_user = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))

    title = Column(String(200), nullable=False)
    description = Column(Text)
    detailed_description = Column(Text)
    workshop_date = Column(Date, nullable=False)
    workshop_time = Column(String(50))
    duration = Column(String(50))
    location = Column(String(255))
    image = Column(String(500))
    price = Column(Numeric(10, 2), nullable=False, default=0)
    total_spots = Column(Integer, nullable=False, default=0)
    spots_left = Column(Integer, nullable=False, default=0)
    level = Column(String(50))
    rating = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    outcomes = relationship(
        "WorkshopOutcomeModel",
        order_by="WorkshopOutcomeModel.order_index",
        cascade="all, delete-orphan",
    )
    requirements = relationship(
        "WorkshopRequirementModel",
        order_by="WorkshopRequirementModel.order_index",
        cascade="all, delete-orphan",
    )


class WorkshopOutcomeModel(Base):
    __tablename__ = "workshop_outcomes"

    id = Column(Integer, primary_key=True)
    workshop_id = Column(Integer, ForeignKey("workshops.workshop_id", ondelete="CASCADE"), nullable=False)
    outcome_text = Column(String(500), nullable=False)
    order_index = Column(Integer, nullable=False)


class WorkshopRequirementModel(Base):
    __tablename__ = "workshop_requirements"

    id = Column(Integer, primary_key=True)
    workshop_id = Column(Integer, ForeignKey("workshops.workshop_id", ondelete="CASCADE"), nullable=False)
    requirement_text = Column(String(500), nullable=False)
    order_index = Column(Integer, nullable=False)
