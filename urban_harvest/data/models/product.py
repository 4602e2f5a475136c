from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime, Numeric, Float
from sqlalchemy.orm import relationship

from urban_harvest.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    product_id = Column(Integer, primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.category_id", ondelete="SET NULL"))
    created_by_user = Column(Integer, ForeignKey("users.user_id", ondelete="SET NULL"))

    name = Column(String(200), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    unit = Column(String(50))
    image = Column(String(500))
    description = Column(Text)
    stock_quantity = Column(Integer, nullable=False, default=0)
    origin = Column(String(100))
    rating = Column(Float, nullable=False, default=0)
    reviews_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    details = relationship("ProductDetailModel", cascade="all, delete-orphan")


class ProductDetailModel(Base):
    __tablename__ = "product_details"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False)
    detail_key = Column(String(100), nullable=False)
    detail_value = Column(String(500))
