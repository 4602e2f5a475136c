import json
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime

from urban_harvest.data.database import Base


class PushSubscriptionModel(Base):
    __tablename__ = "push_subscriptions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    endpoint = Column(String(500), nullable=False, unique=True)
    keys = Column(Text, nullable=False)  # json: {"p256dh": ..., "auth": ...}
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    def subscription_info(self) -> dict:
        return {"endpoint": self.endpoint, "keys": json.loads(self.keys)}
