# urban_harvest/repos/push_repo.py
import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from urban_harvest.data.models.push_subscription import PushSubscriptionModel


class PushRepo:
    def __init__(self, db: Session):
        self.db = db

    def upsert(self, user_id: int, endpoint: str, keys: dict) -> PushSubscriptionModel:
        sub = self.db.execute(
            select(PushSubscriptionModel).where(PushSubscriptionModel.endpoint == endpoint)
        ).scalar_one_or_none()
        if sub is None:
            sub = PushSubscriptionModel(user_id=user_id, endpoint=endpoint)
            self.db.add(sub)
        sub.user_id = user_id
        sub.keys = json.dumps(keys)
        self.db.commit()
        self.db.refresh(sub)
        return sub

    def list_for_user(self, user_id: int) -> list[PushSubscriptionModel]:
        return self.db.execute(
            select(PushSubscriptionModel).where(PushSubscriptionModel.user_id == user_id)
        ).scalars().all()

    def list_all(self) -> list[PushSubscriptionModel]:
        return self.db.execute(select(PushSubscriptionModel)).scalars().all()

    def delete(self, sub: PushSubscriptionModel):
        self.db.delete(sub)
        self.db.commit()
