# urban_harvest/repos/subscription_repo.py
from datetime import date

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from urban_harvest.data.models.subscription import (
    SubscriptionBoxModel,
    SubscriptionModel,
)
from urban_harvest.data.models.review import SubscriptionReviewModel
from urban_harvest.data.models.user import UserModel


class SubscriptionRepo:
    def __init__(self, db: Session):
        self.db = db

    # boxes

    def list_active_boxes(self) -> list[SubscriptionBoxModel]:
        return self.db.execute(
            select(SubscriptionBoxModel)
            .where(SubscriptionBoxModel.is_active.is_(True))
            .order_by(SubscriptionBoxModel.box_id)
        ).scalars().all()

    def get_box(self, box_id: int) -> SubscriptionBoxModel | None:
        return self.db.get(SubscriptionBoxModel, box_id)

    def get_boxes(self, box_ids: list[int], active_only: bool = False) -> list[SubscriptionBoxModel]:
        if not box_ids:
            return []
        stmt = select(SubscriptionBoxModel).where(SubscriptionBoxModel.box_id.in_(box_ids))
        if active_only:
            stmt = stmt.where(SubscriptionBoxModel.is_active.is_(True))
        return self.db.execute(stmt).scalars().all()

    def add_box(self, box: SubscriptionBoxModel) -> SubscriptionBoxModel:
        self.db.add(box)
        self.db.commit()
        self.db.refresh(box)
        return box

    def delete_box(self, box: SubscriptionBoxModel):
        self.db.delete(box)
        self.db.commit()

    def count_active_subscriptions(self, box_id: int) -> int:
        return self.db.execute(
            select(func.count(SubscriptionModel.subscription_id))
            .where(SubscriptionModel.box_id == box_id, SubscriptionModel.status == "active")
        ).scalar_one()

    def list_subscribers(self, box_id: int):
        return self.db.execute(
            select(
                SubscriptionModel.subscription_id,
                SubscriptionModel.user_id,
                SubscriptionModel.status,
                SubscriptionModel.start_date.label("subscribed_at"),
                UserModel.name.label("user_name"),
                UserModel.email.label("user_email"),
                UserModel.profile_image,
            )
            .join(UserModel, SubscriptionModel.user_id == UserModel.user_id)
            .where(SubscriptionModel.box_id == box_id)
            .order_by(SubscriptionModel.start_date.desc())
        ).all()

    # subscriptions

    def add_subscription(self, subscription: SubscriptionModel) -> SubscriptionModel:
        # flush only, the caller owns the transaction
        self.db.add(subscription)
        self.db.flush()
        return subscription

    def get_user_subscription(self, subscription_id: int, user_id: int) -> SubscriptionModel | None:
        return self.db.execute(
            select(SubscriptionModel).where(
                SubscriptionModel.subscription_id == subscription_id,
                SubscriptionModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def list_user_subscriptions(self, user_id: int, statuses: tuple[str, ...]):
        return self.db.execute(
            select(SubscriptionModel, SubscriptionBoxModel)
            .join(SubscriptionBoxModel, SubscriptionModel.box_id == SubscriptionBoxModel.box_id)
            .where(SubscriptionModel.user_id == user_id, SubscriptionModel.status.in_(statuses))
            .order_by(SubscriptionModel.created_at.desc(), SubscriptionModel.subscription_id.desc())
        ).all()

    def list_history(self, user_id: int):
        return self.db.execute(
            select(SubscriptionModel, SubscriptionBoxModel, SubscriptionReviewModel)
            .join(SubscriptionBoxModel, SubscriptionModel.box_id == SubscriptionBoxModel.box_id)
            .outerjoin(
                SubscriptionReviewModel,
                (SubscriptionReviewModel.subscription_id == SubscriptionModel.subscription_id)
                & (SubscriptionReviewModel.user_id == user_id),
            )
            .where(SubscriptionModel.user_id == user_id, SubscriptionModel.status == "cancelled")
            .order_by(SubscriptionModel.cancelled_at.desc())
        ).all()

    def list_due(self, today: date):
        return self.db.execute(
            select(SubscriptionModel, SubscriptionBoxModel)
            .join(SubscriptionBoxModel, SubscriptionModel.box_id == SubscriptionBoxModel.box_id)
            .where(
                SubscriptionModel.status == "active",
                SubscriptionModel.next_delivery_date <= today,
            )
        ).all()

    def list_user_reviews(self, user_id: int):
        return self.db.execute(
            select(
                SubscriptionReviewModel,
                SubscriptionBoxModel.name.label("box_name"),
                SubscriptionBoxModel.image_url,
                SubscriptionModel.status.label("subscription_status"),
            )
            .join(SubscriptionModel, SubscriptionReviewModel.subscription_id == SubscriptionModel.subscription_id)
            .join(SubscriptionBoxModel, SubscriptionModel.box_id == SubscriptionBoxModel.box_id)
            .where(SubscriptionReviewModel.user_id == user_id)
            .order_by(SubscriptionReviewModel.created_at.desc(), SubscriptionReviewModel.review_id.desc())
        ).all()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
