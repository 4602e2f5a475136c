# urban_harvest/repos/event_repo.py
from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from urban_harvest.data.models.event import EventModel
from urban_harvest.data.models.catalog import CategoryModel, OrganizerModel
from urban_harvest.data.models.booking import BookingModel
from urban_harvest.data.models.user import UserModel
from urban_harvest.data.models.review import EventReviewModel


class EventRepo:
    def __init__(self, db: Session):
        self.db = db

    def _listing(self):
        spots_booked = (
            select(func.coalesce(func.sum(BookingModel.quantity), 0))
            .where(BookingModel.event_id == EventModel.event_id)
            .correlate(EventModel)
            .scalar_subquery()
        )
        return (
            select(
                EventModel,
                CategoryModel.category_name,
                OrganizerModel.name.label("organizer_name"),
                OrganizerModel.role.label("organizer_role"),
                OrganizerModel.image.label("organizer_image"),
                spots_booked.label("spots_booked"),
            )
            .outerjoin(CategoryModel, EventModel.category_id == CategoryModel.category_id)
            .outerjoin(OrganizerModel, EventModel.organizer_id == OrganizerModel.organizer_id)
        )

    def list_events(self):
        return self.db.execute(self._listing().order_by(EventModel.event_date.desc())).all()

    def get_event_row(self, event_id: int):
        return self.db.execute(self._listing().where(EventModel.event_id == event_id)).first()

    def get_event(self, event_id: int) -> EventModel | None:
        return self.db.get(EventModel, event_id)

    def add_event(self, event: EventModel) -> EventModel:
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def delete_event(self, event: EventModel):
        self.db.delete(event)
        self.db.commit()

    def reserve_spots(self, event_id: int, quantity: int) -> int:
        # conditional decrement, 0 rows means not enough spots left
        result = self.db.execute(
            update(EventModel)
            .where(EventModel.event_id == event_id, EventModel.spots_left >= quantity)
            .values(spots_left=EventModel.spots_left - quantity)
        )
        return result.rowcount

    def list_reviews(self, event_id: int):
        return self.db.execute(
            select(EventReviewModel, UserModel.name.label("user_name"), UserModel.profile_image)
            .join(UserModel, EventReviewModel.user_id == UserModel.user_id)
            .where(EventReviewModel.event_id == event_id)
            .order_by(EventReviewModel.created_at.desc(), EventReviewModel.review_id.desc())
        ).all()

    def review_stats(self) -> dict[int, tuple[int, float]]:
        rows = self.db.execute(
            select(EventReviewModel.event_id, func.count(), func.avg(EventReviewModel.rating))
            .group_by(EventReviewModel.event_id)
        ).all()
        return {event_id: (count, float(avg or 0)) for event_id, count, avg in rows}

    def list_bookings(self, event_id: int):
        return self.db.execute(
            select(
                BookingModel.booking_id,
                BookingModel.quantity,
                BookingModel.created_at.label("booking_date"),
                UserModel.name.label("user_name"),
                UserModel.email.label("user_email"),
                UserModel.phone.label("user_phone"),
            )
            .join(UserModel, BookingModel.user_id == UserModel.user_id)
            .where(BookingModel.event_id == event_id)
            .order_by(BookingModel.created_at.desc())
        ).all()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
