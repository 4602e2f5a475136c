# urban_harvest/services/subscription_service.py
import calendar
from datetime import date, datetime, timedelta, timezone

from sqlalchemy.orm import Session

from urban_harvest.data.models.subscription import (
    SubscriptionBoxModel,
    SubscriptionBoxItemModel,
    SubscriptionModel,
)
from urban_harvest.domain.schemas import SubscriptionBoxIn, SubscriptionIn, CurrentUser
from urban_harvest.repos.subscription_repo import SubscriptionRepo
from urban_harvest.repos.review_repo import ReviewRepo
from urban_harvest.data.models.review import SubscriptionReviewModel
from urban_harvest.services.notification_service import NotificationService
from urban_harvest.services.upload_service import remove_uploaded_image
from urban_harvest.services.review_service import average
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)


def next_delivery_date(frequency: str, start: date | None = None) -> date:
    """
    Next delivery after `start` (today by default).
    Monthly deliveries land on the same day next month, clamped to its last day.
    """
    start = start or date.today()
    if frequency == "weekly":
        return start + timedelta(days=7)
    if frequency == "biweekly":
        return start + timedelta(days=14)
    if frequency == "monthly":
        year, month = (start.year + 1, 1) if start.month == 12 else (start.year, start.month + 1)
        day = min(start.day, calendar.monthrange(year, month)[1])
        return date(year, month, day)
    raise ValueError(f"Invalid frequency: {frequency}")


def _box_items(payload: SubscriptionBoxIn) -> list[SubscriptionBoxItemModel]:
    return [
        SubscriptionBoxItemModel(
            item_name=item.item_name,
            quantity=item.quantity,
            description=item.description or "",
            display_order=i,
        )
        for i, item in enumerate(payload.items or [], start=1)
    ]


class SubscriptionBoxService:
    def __init__(self, db: Session):
        self.repo = SubscriptionRepo(db)
        self.reviews = ReviewRepo(db, SubscriptionReviewModel, "box_id", SubscriptionBoxModel, "box_id")
        self.notification_service = NotificationService()

    def list_boxes(self) -> dict:
        boxes = []
        for box in self.repo.list_active_boxes():
            data = box.to_dict()
            data["items"] = [i.to_dict() for i in box.items]
            boxes.append(data)
        return {"boxes": boxes}

    def get_box(self, box_id: int) -> dict:
        box = self.repo.get_box(box_id)
        if not box:
            raise LookupError("Subscription box not found")

        data = box.to_dict()
        data["items"] = [i.to_dict() for i in box.items]
        reviews = []
        for review, user_name, profile_image in self.reviews.list_for_target(box_id):
            item = review.to_dict()
            item["user_name"] = user_name
            item["profile_image"] = profile_image
            reviews.append(item)
        data["reviews"] = reviews
        data["total_reviews"] = len(reviews)
        data["average_rating"] = average([r["rating"] for r in reviews])
        data["subscribers"] = [row._asdict() for row in self.repo.list_subscribers(box_id)]
        return {"box": data}

    def create_box(self, payload: SubscriptionBoxIn) -> dict:
        box = SubscriptionBoxModel(
            name=payload.name,
            description=payload.description,
            price=payload.price,
            frequency=payload.frequency,
            image_url=payload.image_url or None,
            is_active=True,
        )
        box.items = _box_items(payload)
        box = self.repo.add_box(box)
        logger.info(f"Subscription box {box.box_id} created")

        self.notification_service.broadcast(
            "New Subscription Box!",
            f"{box.name} - {box.frequency} delivery. Subscribe now!",
            f"/subscription-boxes/{box.box_id}",
        )
        return {"message": "Subscription box created successfully", "box_id": box.box_id}

    def update_box(self, box_id: int, payload: SubscriptionBoxIn) -> dict:
        box = self.repo.get_box(box_id)
        if not box:
            raise LookupError("Subscription box not found")

        box.name = payload.name
        box.description = payload.description
        box.price = payload.price
        box.frequency = payload.frequency
        box.image_url = payload.image_url or None
        box.is_active = payload.is_active
        # items are replaced only when the request carries them
        if payload.items is not None:
            box.items = _box_items(payload)
        self.repo.commit()

        logger.info(f"Subscription box {box_id} updated")
        return {"message": "Subscription box updated successfully"}

    def delete_box(self, box_id: int) -> dict:
        box = self.repo.get_box(box_id)
        if not box:
            raise LookupError("Subscription box not found")

        if self.repo.count_active_subscriptions(box_id) > 0:
            raise ValueError("Cannot delete box with active subscriptions. Please deactivate instead.")

        image = box.image_url
        self.repo.delete_box(box)
        remove_uploaded_image(image)

        logger.info(f"Subscription box {box_id} deleted")
        return {"message": "Subscription box deleted successfully"}


class SubscriptionService:
    """
    Customer subscriptions and their state machine:

    active -> paused (pause), paused -> active (resume),
    active|paused -> cancelled (cancel), cancelled -> active (reactivate).
    """

    def __init__(self, db: Session):
        self.repo = SubscriptionRepo(db)

    def _owned(self, subscription_id: int, user_id: int) -> SubscriptionModel:
        subscription = self.repo.get_user_subscription(subscription_id, user_id)
        if not subscription:
            raise LookupError("Subscription not found")
        return subscription

    def _next_delivery(self, subscription: SubscriptionModel) -> date:
        box = self.repo.get_box(subscription.box_id)
        return next_delivery_date(box.frequency if box else "monthly")

    def create(self, payload: SubscriptionIn, user: CurrentUser) -> dict:
        box = self.repo.get_box(payload.box_id)
        if not box or not box.is_active:
            raise LookupError("Subscription box not found")

        today = date.today()
        subscription = self.repo.add_subscription(SubscriptionModel(
            user_id=user.id,
            box_id=box.box_id,
            status="active",
            start_date=today,
            next_delivery_date=next_delivery_date(payload.frequency or box.frequency or "monthly", today),
        ))
        self.repo.commit()

        logger.info(f"Subscription {subscription.subscription_id} to box {box.box_id} by user {user.id}")
        return {"message": "Subscription created successfully", "subscription_id": subscription.subscription_id}

    def list_current(self, user_id: int) -> dict:
        subscriptions = []
        for sub, box in self.repo.list_user_subscriptions(user_id, ("active", "paused")):
            data = sub.to_dict()
            data.update(
                name=box.name,
                description=box.description,
                image_url=box.image_url,
                price=box.price,
                frequency=box.frequency,
            )
            subscriptions.append(data)
        return {"subscriptions": subscriptions}

    def list_history(self, user_id: int) -> dict:
        history = []
        for sub, box, review in self.repo.list_history(user_id):
            data = sub.to_dict()
            data.update(
                name=box.name,
                description=box.description,
                image_url=box.image_url,
                price=box.price,
                frequency=box.frequency,
                review_id=review.review_id if review else None,
                rating=review.rating if review else None,
                comment=review.comment if review else None,
            )
            history.append(data)
        return {"history": history}

    def cancel(self, subscription_id: int, user_id: int) -> dict:
        subscription = self._owned(subscription_id, user_id)
        if subscription.status == "cancelled":
            raise ValueError("Subscription already cancelled")

        subscription.status = "cancelled"
        subscription.cancelled_at = datetime.now(timezone.utc)
        self.repo.commit()
        logger.info(f"Subscription {subscription_id} cancelled")
        return {"message": "Subscription cancelled successfully"}

    def pause(self, subscription_id: int, user_id: int) -> dict:
        subscription = self._owned(subscription_id, user_id)
        if subscription.status == "paused":
            raise ValueError("Subscription already paused")
        if subscription.status == "cancelled":
            raise ValueError("Cannot pause a cancelled subscription")

        subscription.status = "paused"
        self.repo.commit()
        logger.info(f"Subscription {subscription_id} paused")
        return {"message": "Subscription paused successfully"}

    def resume(self, subscription_id: int, user_id: int) -> dict:
        subscription = self._owned(subscription_id, user_id)
        if subscription.status != "paused":
            raise ValueError("Only paused subscriptions can be resumed")

        subscription.status = "active"
        subscription.next_delivery_date = self._next_delivery(subscription)
        self.repo.commit()
        logger.info(f"Subscription {subscription_id} resumed")
        return {"message": "Subscription resumed successfully"}

    def reactivate(self, subscription_id: int, user_id: int) -> dict:
        subscription = self._owned(subscription_id, user_id)
        if subscription.status != "cancelled":
            raise ValueError("Only cancelled subscriptions can be reactivated")

        subscription.status = "active"
        subscription.cancelled_at = None
        subscription.next_delivery_date = self._next_delivery(subscription)
        self.repo.commit()
        logger.info(f"Subscription {subscription_id} reactivated")
        return {"message": "Subscription reactivated successfully"}

    def roll_deliveries(self, today: date | None = None) -> list[tuple[SubscriptionModel, SubscriptionBoxModel]]:
        """Move every due active subscription to its next delivery date."""
        today = today or date.today()
        rolled = []
        for sub, box in self.repo.list_due(today):
            nxt = sub.next_delivery_date
            while nxt <= today:
                nxt = next_delivery_date(box.frequency, nxt)
            sub.next_delivery_date = nxt
            rolled.append((sub, box))
        self.repo.commit()
        return rolled
