# urban_harvest/repos/workshop_repo.py
from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from urban_harvest.data.models.workshop import WorkshopModel
from urban_harvest.data.models.catalog import CategoryModel, InstructorModel
from urban_harvest.data.models.booking import BookingModel
from urban_harvest.data.models.user import UserModel
from urban_harvest.data.models.review import WorkshopReviewModel


class WorkshopRepo:
    def __init__(self, db: Session):
        self.db = db

    def _listing(self):
        spots_booked = (
            select(func.coalesce(func.sum(BookingModel.quantity), 0))
            .where(BookingModel.workshop_id == WorkshopModel.workshop_id)
            .correlate(WorkshopModel)
            .scalar_subquery()
        )
        return (
            select(
                WorkshopModel,
                CategoryModel.category_name,
                InstructorModel.name.label("instructor_name"),
                InstructorModel.role.label("instructor_role"),
                InstructorModel.image.label("instructor_image"),
                spots_booked.label("spots_booked"),
            )
            .outerjoin(CategoryModel, WorkshopModel.category_id == CategoryModel.category_id)
            .outerjoin(InstructorModel, WorkshopModel.instructor_id == InstructorModel.instructor_id)
        )

    def list_workshops(self):
        return self.db.execute(self._listing().order_by(WorkshopModel.workshop_date.desc())).all()

    def get_workshop_row(self, workshop_id: int):
        return self.db.execute(self._listing().where(WorkshopModel.workshop_id == workshop_id)).first()

    def get_workshop(self, workshop_id: int) -> WorkshopModel | None:
        return self.db.get(WorkshopModel, workshop_id)

    def add_workshop(self, workshop: WorkshopModel) -> WorkshopModel:
        self.db.add(workshop)
        self.db.commit()
        self.db.refresh(workshop)
        return workshop

    def delete_workshop(self, workshop: WorkshopModel):
        self.db.delete(workshop)
        self.db.commit()

    def reserve_spots(self, workshop_id: int, quantity: int) -> int:
        # conditional decrement, 0 rows means not enough spots left
        result = self.db.execute(
            update(WorkshopModel)
            .where(WorkshopModel.workshop_id == workshop_id, WorkshopModel.spots_left >= quantity)
            .values(spots_left=WorkshopModel.spots_left - quantity)
        )
        return result.rowcount

    def list_reviews(self, workshop_id: int):
        return self.db.execute(
            select(WorkshopReviewModel, UserModel.name.label("user_name"), UserModel.profile_image)
            .join(UserModel, WorkshopReviewModel.user_id == UserModel.user_id)
            .where(WorkshopReviewModel.workshop_id == workshop_id)
            .order_by(WorkshopReviewModel.created_at.desc(), WorkshopReviewModel.review_id.desc())
        ).all()

    def review_stats(self) -> dict[int, tuple[int, float]]:
        rows = self.db.execute(
            select(WorkshopReviewModel.workshop_id, func.count(), func.avg(WorkshopReviewModel.rating))
            .group_by(WorkshopReviewModel.workshop_id)
        ).all()
        return {workshop_id: (count, float(avg or 0)) for workshop_id, count, avg in rows}

    def list_bookings(self, workshop_id: int):
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
            .where(BookingModel.workshop_id == workshop_id)
            .order_by(BookingModel.created_at.desc())
        ).all()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
