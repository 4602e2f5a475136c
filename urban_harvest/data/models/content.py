from sqlalchemy import Column, Integer, String, Text, Boolean

from urban_harvest.data.database import Base


class TestimonialModel(Base):
    __tablename__ = "testimonials"

    testimonial_id = Column(Integer, primary_key=True)
    customer_name = Column(String(100), nullable=False)
    customer_role = Column(String(100))
    customer_image = Column(String(500))
    rating = Column(Integer, nullable=False, default=5)
    testimonial_text = Column(Text, nullable=False)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)


class HeroSlideModel(Base):
    __tablename__ = "hero_slides"

    slide_id = Column(Integer, primary_key=True)
    image = Column(String(500), nullable=False)
    title = Column(String(200), nullable=False)
    subtitle = Column(String(500))
    cta_text = Column(String(100))
    cta_link = Column(String(255))
    order_index = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
