from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Text

from urban_harvest.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="customer")  # customer, admin, super_admin
    phone = Column(String(20))
    address = Column(Text)
    profile_image = Column(String(500))
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    def public_dict(self) -> dict:
        data = self.to_dict()
        data.pop("password_hash", None)
        return data
