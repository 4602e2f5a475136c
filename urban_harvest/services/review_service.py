# urban_harvest/services/review_service.py
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from urban_harvest.data.models.product import ProductModel
from urban_harvest.data.models.event import EventModel
from urban_harvest.data.models.workshop import WorkshopModel
from urban_harvest.data.models.subscription import SubscriptionBoxModel
from urban_harvest.data.models.review import (
    ProductReviewModel,
    EventReviewModel,
    WorkshopReviewModel,
    SubscriptionReviewModel,
)
from urban_harvest.domain.schemas import (
    CurrentUser,
    ProductReviewIn,
    EventReviewIn,
    WorkshopReviewIn,
    SubscriptionReviewIn,
    ReviewBodyIn,
)
from urban_harvest.repos.review_repo import ReviewRepo
from urban_harvest.repos.order_repo import OrderRepo
from urban_harvest.repos.booking_repo import BookingRepo
from urban_harvest.repos.subscription_repo import SubscriptionRepo
from urban_harvest.utils.logging import get_logger

logger = get_logger(__name__)


def round_rating(mean: float) -> float:
    """One decimal, halves rounded up."""
    return float(Decimal(str(mean)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def average(ratings: list[int]) -> float:
    """Mean rating to one decimal, 0 when there are no ratings."""
    if not ratings:
        return 0
    return round_rating(sum(ratings) / len(ratings))


def _review_rows(rows) -> list[dict]:
    reviews = []
    for row in rows:
        values = row._asdict()
        review = values.pop(next(iter(values)))
        data = review.to_dict()
        data.update(values)
        reviews.append(data)
    return reviews


def _reject_admin(user: CurrentUser):
    if user.is_admin:
        raise PermissionError("Administrators cannot submit reviews")


class ProductReviewService:
    def __init__(self, db: Session):
        self.repo = ReviewRepo(db, ProductReviewModel, "product_id", ProductModel, "product_id")
        self.orders = OrderRepo(db)

    def list_for_product(self, product_id: int) -> dict:
        reviews = _review_rows(self.repo.list_for_target(product_id))
        return {
            "reviews": reviews,
            "averageRating": average([r["rating"] for r in reviews]),
            "totalReviews": len(reviews),
        }

    def list_for_user(self, user_id: int) -> dict:
        rows = self.repo.list_user_reviews(
            user_id, ProductModel.name.label("product_name"), ProductModel.image.label("image_url")
        )
        return {"reviews": _review_rows(rows)}

    def create(self, payload: ProductReviewIn, user: CurrentUser) -> dict:
        _reject_admin(user)

        if self.repo.find(user_id=user.id, product_id=payload.product_id, order_id=payload.order_id):
            raise ValueError("You have already reviewed this product for this order")

        if not self.repo.db.get(ProductModel, payload.product_id):
            raise LookupError("Product not found")

        verified = False
        if payload.order_id:
            verified = self.orders.has_ordered_product(user.id, payload.product_id, payload.order_id) is not None

        try:
            review = self.repo.add_review(ProductReviewModel(
                user_id=user.id,
                product_id=payload.product_id,
                order_id=payload.order_id,
                rating=payload.rating,
                comment=payload.comment or None,
                verified_purchase=verified,
            ))
            count, rating = self.repo.recompute_rating(payload.product_id, with_count=True)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {payload.product_id} reviewed by user {user.id}, rating now {rating:.2f} ({count})")
        return {"message": "Review created successfully", "review_id": review.review_id}

    def can_review(self, product_id: int, user_id: int) -> dict:
        if self.repo.find(user_id=user_id, product_id=product_id):
            return {"canReview": False, "reason": "Already reviewed"}

        order_id = self.orders.has_ordered_product(user_id, product_id)
        return {
            "canReview": order_id is not None,
            "reason": None if order_id is not None else "Must order product first",
            "order_id": order_id,
        }

    def delete(self, review_id: int, user_id: int) -> dict:
        review = self.repo.get_user_review(review_id, user_id)
        if not review:
            raise LookupError("Review not found or unauthorized")

        product_id = review.product_id
        try:
            self.repo.delete_review(review)
            self.repo.recompute_rating(product_id, with_count=True)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product review {review_id} deleted by user {user_id}")
        return {"message": "Review deleted successfully"}


class AttendanceReviewService:
    """Reviews of events and workshops, verified against the reviewer's bookings."""

    _KINDS = {
        "event": (EventReviewModel, EventModel, "event_id"),
        "workshop": (WorkshopReviewModel, WorkshopModel, "workshop_id"),
    }

    def __init__(self, db: Session, kind: str):
        review_model, target_model, key = self._KINDS[kind]
        self.kind = kind
        self.key = key
        self.review_model = review_model
        self.target_model = target_model
        self.repo = ReviewRepo(db, review_model, key, target_model, key)
        self.bookings = BookingRepo(db)

    def list_for_target(self, target_id: int) -> dict:
        reviews = _review_rows(self.repo.list_for_target(target_id))
        return {
            "reviews": reviews,
            "averageRating": average([r["rating"] for r in reviews]),
            "totalReviews": len(reviews),
        }

    def create(self, payload: EventReviewIn | WorkshopReviewIn, user: CurrentUser) -> dict:
        _reject_admin(user)
        target_id = getattr(payload, self.key)

        if self.repo.find(user_id=user.id, **{self.key: target_id}):
            raise ValueError(f"You have already reviewed this {self.kind}")

        if not self.repo.db.get(self.target_model, target_id):
            raise LookupError(f"{self.kind.capitalize()} not found")

        verified = False
        if payload.booking_id:
            booking = self.bookings.find_user_booking(
                user.id, booking_id=payload.booking_id, **{self.key: target_id}
            )
            verified = booking is not None

        try:
            review = self.repo.add_review(self.review_model(
                user_id=user.id,
                booking_id=payload.booking_id,
                rating=payload.rating,
                comment=payload.comment or None,
                verified_attendance=verified,
                **{self.key: target_id},
            ))
            self.repo.recompute_rating(target_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"{self.kind.capitalize()} {target_id} reviewed by user {user.id}")
        return {"message": "Review created successfully", "review_id": review.review_id}

    def can_review(self, target_id: int, user_id: int) -> dict:
        if self.repo.find(user_id=user_id, **{self.key: target_id}):
            return {"canReview": False, "reason": "Already reviewed"}

        booking = self.bookings.find_user_booking(user_id, status="attended", **{self.key: target_id})
        return {
            "canReview": booking is not None,
            "reason": None if booking else f"Must attend {self.kind} first",
            "booking_id": booking.booking_id if booking else None,
        }

    def delete(self, review_id: int, user_id: int) -> dict:
        review = self.repo.get_user_review(review_id, user_id)
        if not review:
            raise LookupError("Review not found or unauthorized")

        target_id = getattr(review, self.key)
        try:
            self.repo.delete_review(review)
            self.repo.recompute_rating(target_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"{self.kind.capitalize()} review {review_id} deleted by user {user_id}")
        return {"message": "Review deleted successfully"}


class SubscriptionReviewService:
    """
    Reviews of subscription boxes, one per subscription.
    The box keeps the mean rating and the number of reviews.
    """

    def __init__(self, db: Session):
        self.repo = ReviewRepo(db, SubscriptionReviewModel, "box_id", SubscriptionBoxModel, "box_id")
        self.subscriptions = SubscriptionRepo(db)

    def list_for_box(self, box_id: int) -> dict:
        return {"reviews": _review_rows(self.repo.list_for_target(box_id))}

    def list_for_user(self, user_id: int) -> dict:
        return {"reviews": _review_rows(self.subscriptions.list_user_reviews(user_id))}

    def get_for_subscription(self, subscription_id: int, user_id: int) -> dict:
        review = self.repo.find(subscription_id=subscription_id, user_id=user_id)
        return {"review": review.to_dict() if review else None}

    def create(self, payload: SubscriptionReviewIn, user: CurrentUser) -> dict:
        subscription = self.subscriptions.get_user_subscription(payload.subscription_id, user.id)
        if not subscription:
            raise LookupError("Subscription not found or does not belong to you")

        if self.repo.find(subscription_id=subscription.subscription_id, user_id=user.id):
            raise ValueError("You have already reviewed this subscription")

        try:
            review = self.repo.add_review(SubscriptionReviewModel(
                user_id=user.id,
                subscription_id=subscription.subscription_id,
                box_id=subscription.box_id,
                rating=payload.rating,
                comment=payload.comment or None,
            ))
            self.repo.recompute_rating(subscription.box_id, with_count=True)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Subscription {subscription.subscription_id} reviewed by user {user.id}")
        return {"message": "Review submitted successfully", "review_id": review.review_id}

    def update(self, review_id: int, payload: ReviewBodyIn, user_id: int) -> dict:
        review = self.repo.get_user_review(review_id, user_id)
        if not review:
            raise LookupError("Review not found or does not belong to you")

        try:
            review.rating = payload.rating
            review.comment = payload.comment or None
            self.repo.db.flush()
            self.repo.recompute_rating(review.box_id, with_count=True)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Subscription review {review_id} updated by user {user_id}")
        return {"message": "Review updated successfully"}

    def delete(self, review_id: int, user_id: int) -> dict:
        review = self.repo.get_user_review(review_id, user_id)
        if not review:
            raise LookupError("Review not found or does not belong to you")

        box_id = review.box_id
        try:
            self.repo.delete_review(review)
            self.repo.recompute_rating(box_id, with_count=True)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Subscription review {review_id} deleted by user {user_id}")
        return {"message": "Review deleted successfully"}
