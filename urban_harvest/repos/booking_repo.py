# urban_harvest/repos/booking_repo.py
from sqlalchemy import select, func, case, and_
from sqlalchemy.orm import Session, aliased

from urban_harvest.data.models.booking import BookingModel
from urban_harvest.data.models.event import EventModel
from urban_harvest.data.models.workshop import WorkshopModel
from urban_harvest.data.models.review import EventReviewModel, WorkshopReviewModel


class BookingRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_booking(self, booking: BookingModel) -> BookingModel:
        # flush only, the caller owns the transaction
        self.db.add(booking)
        self.db.flush()
        return booking

    def find_user_booking(self, user_id: int, *, event_id: int | None = None,
                          workshop_id: int | None = None, booking_id: int | None = None,
                          status: str | None = None) -> BookingModel | None:
        stmt = select(BookingModel).where(BookingModel.user_id == user_id)
        if event_id is not None:
            stmt = stmt.where(BookingModel.event_id == event_id)
        if workshop_id is not None:
            stmt = stmt.where(BookingModel.workshop_id == workshop_id)
        if booking_id is not None:
            stmt = stmt.where(BookingModel.booking_id == booking_id)
        if status is not None:
            stmt = stmt.where(BookingModel.status == status)
        return self.db.execute(stmt.order_by(BookingModel.booking_id).limit(1)).scalar_one_or_none()

    def list_user_bookings(self, user_id: int):
        e = aliased(EventModel)
        w = aliased(WorkshopModel)

        event_reviewed = (
            select(func.count(EventReviewModel.review_id))
            .where(and_(EventReviewModel.event_id == BookingModel.event_id,
                        EventReviewModel.user_id == BookingModel.user_id))
            .correlate(BookingModel)
            .scalar_subquery()
        )
        workshop_reviewed = (
            select(func.count(WorkshopReviewModel.review_id))
            .where(and_(WorkshopReviewModel.workshop_id == BookingModel.workshop_id,
                        WorkshopReviewModel.user_id == BookingModel.user_id))
            .correlate(BookingModel)
            .scalar_subquery()
        )
        has_reviewed = case(
            (BookingModel.booking_type == "event", event_reviewed),
            (BookingModel.booking_type == "workshop", workshop_reviewed),
            else_=0,
        )

        return self.db.execute(
            select(
                BookingModel,
                e.title.label("event_title"),
                e.event_date,
                e.event_time,
                e.location.label("event_location"),
                e.image.label("event_image"),
                e.price.label("event_price"),
                w.title.label("workshop_title"),
                w.workshop_date,
                w.workshop_time,
                w.location.label("workshop_location"),
                w.image.label("workshop_image"),
                w.price.label("workshop_price"),
                has_reviewed.label("has_reviewed"),
            )
            .outerjoin(e, BookingModel.event_id == e.event_id)
            .outerjoin(w, BookingModel.workshop_id == w.workshop_id)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.created_at.desc(), BookingModel.booking_id.desc())
        ).all()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
